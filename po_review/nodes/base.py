from abc import ABC, abstractmethod

from po_review.core.workflow_state import DashboardWorkflowState


class BaseNode(ABC):
    """A step of the dashboard workflow.

    Subclasses set `name` (also the graph node id) and implement `__call__`,
    returning the partial state update. Every node appends its name to the
    trajectory; nodes after a failed fetch only do that.
    """

    name: str

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if not getattr(cls, 'name', None) and 'Abstract' not in cls.__name__:
            raise TypeError(f"{cls.__name__} must define a 'name' class variable")

    @abstractmethod
    def __call__(self, state: DashboardWorkflowState) -> dict:
        ...

    def _visited(self, state: DashboardWorkflowState) -> list[str]:
        return state.get("trajectory", []) + [self.name]

    def _pass_through(self, state: DashboardWorkflowState) -> dict | None:
        """Trajectory-only update when the fetch already failed, else None."""
        if state.get("final_status") == "error":
            return {"trajectory": self._visited(state)}
        return None
