import opik

from po_review.core.workflow_state import DashboardWorkflowState
from po_review.nodes.base import BaseNode


class ReportNode(BaseNode):
    name = "report"

    @opik.track(name="report_node")
    def __call__(self, state: DashboardWorkflowState) -> dict:
        if state.get("error_message"):
            final_status = "error"
        elif not state.get("records"):
            final_status = "empty"
        else:
            final_status = "ready"

        return {
            "final_status": final_status,
            "trajectory": self._visited(state),
        }
