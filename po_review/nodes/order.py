from po_review.core.ordering import order_for_display
from po_review.core.workflow_state import DashboardWorkflowState
from po_review.nodes.base import BaseNode


class OrderNode(BaseNode):
    name = "order"

    def __call__(self, state: DashboardWorkflowState) -> dict:
        skipped = self._pass_through(state)
        if skipped is not None:
            return skipped

        ordered = order_for_display(
            state.get("classified_orders", []),
            is_error=lambda order: order.is_error,
        )
        return {
            "ordered_orders": ordered,
            "trajectory": self._visited(state),
        }
