from po_review.core.metrics import summarize
from po_review.core.workflow_state import DashboardWorkflowState
from po_review.nodes.base import BaseNode


class SummarizeNode(BaseNode):
    name = "summarize"

    def __call__(self, state: DashboardWorkflowState) -> dict:
        skipped = self._pass_through(state)
        if skipped is not None:
            return skipped

        # Metrics read the fetch order, not the display order.
        return {
            "metrics": summarize(state.get("records", [])),
            "trajectory": self._visited(state),
        }
