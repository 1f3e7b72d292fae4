import opik

from po_review.core.classification import classify
from po_review.core.workflow_state import ClassifiedOrder, DashboardWorkflowState
from po_review.nodes.base import BaseNode


class ClassifyNode(BaseNode):
    name = "classify"

    @opik.track(name="classify_node")
    def __call__(self, state: DashboardWorkflowState) -> dict:
        skipped = self._pass_through(state)
        if skipped is not None:
            return skipped

        classified = [
            ClassifiedOrder(record=record, classification=classify(record))
            for record in state.get("records", [])
        ]
        return {
            "classified_orders": classified,
            "trajectory": self._visited(state),
        }
