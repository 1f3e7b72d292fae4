from typing import TypedDict

from pydantic import BaseModel

from po_review.core.classification import Classification
from po_review.core.metrics import DashboardMetrics
from po_review.core.purchase_order import PurchaseOrderRecord


class ClassifiedOrder(BaseModel):
    """A record paired with its classifier output."""
    record: PurchaseOrderRecord
    classification: Classification

    @property
    def is_error(self) -> bool:
        return self.classification.is_error


class DashboardWorkflowState(TypedDict, total=False):
    # --- Fetch ---
    records: list[PurchaseOrderRecord]   # newest first, as fetched

    # --- Classification ---
    classified_orders: list[ClassifiedOrder]

    # --- Ordering ---
    ordered_orders: list[ClassifiedOrder]

    # --- Metrics ---
    metrics: DashboardMetrics

    # --- Bookkeeping ---
    trajectory: list[str]                # node names visited
    error_message: str

    # --- Final ---
    final_status: str                    # "ready" | "empty" | "error"
