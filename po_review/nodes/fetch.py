import logging

import opik

from po_review.nodes.base import BaseNode
from po_review.services.record_store.base import RecordStore
from po_review.core.workflow_state import DashboardWorkflowState

logger = logging.getLogger("po_review.workflow")


class FetchNode(BaseNode):
    name = "fetch"

    def __init__(self, store: RecordStore):
        self.store = store

    @opik.track(name="fetch_node")
    def __call__(self, state: DashboardWorkflowState) -> dict:
        try:
            result = self.store.fetch_todays_purchase_orders()
        except Exception as e:
            logger.exception("Record store raised while fetching purchase orders")
            return {
                "final_status": "error",
                "error_message": f"Failed to fetch data: {e}",
                "trajectory": self._visited(state),
            }

        if not result.ok:
            return {
                "final_status": "error",
                "error_message": f"Failed to fetch data: {result.error.message}",
                "trajectory": self._visited(state),
            }

        records = result.data or []
        logger.info(f"Fetched {len(records)} purchase orders for today")
        return {
            "records": records,
            "trajectory": self._visited(state),
        }
