from collections.abc import Sequence
from datetime import datetime

from pydantic import BaseModel

from po_review.core.classification import classify
from po_review.core.purchase_order import PurchaseOrderRecord


class DashboardMetrics(BaseModel):
    """Counts for the dashboard tiles.

    ``last_updated`` is None when there is no data; it is never defaulted to a
    timestamp.
    """
    entry_count: int
    error_count: int
    last_updated: datetime | None = None

    @property
    def has_data(self) -> bool:
        return self.last_updated is not None


def summarize(records: Sequence[PurchaseOrderRecord]) -> DashboardMetrics:
    # The caller fetched newest first; the head is the most recent entry.
    return DashboardMetrics(
        entry_count=len(records),
        error_count=sum(1 for record in records if classify(record).is_error),
        last_updated=records[0].created_at if records else None,
    )
