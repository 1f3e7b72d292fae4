"""Immutable state containers for the dashboard and the rules view.

Every transition returns a new state object. Fetches are tagged with a
sequence token taken from the state; a result carrying an older token than
the latest request is ignored, so the last request issued wins no matter in
which order responses arrive.
"""
from pydantic import BaseModel, ConfigDict

from po_review.core.metrics import DashboardMetrics
from po_review.core.prompt_rule import PromptRule
from po_review.core.workflow_state import ClassifiedOrder


class DashboardState(BaseModel):
    model_config = ConfigDict(frozen=True)

    orders: tuple[ClassifiedOrder, ...] = ()
    metrics: DashboardMetrics | None = None
    expanded: frozenset[str] = frozenset()
    loading: bool = False
    error: str | None = None
    request_seq: int = 0


class RulesState(BaseModel):
    model_config = ConfigDict(frozen=True)

    rules: tuple[PromptRule, ...] = ()
    loading: bool = False
    error: str | None = None
    success_message: str | None = None
    request_seq: int = 0


State = DashboardState | RulesState


def begin_fetch(state: State) -> tuple[State, int]:
    token = state.request_seq + 1
    return state.model_copy(update={"loading": True, "request_seq": token}), token


def is_current(state: State, token: int) -> bool:
    return token == state.request_seq


def apply_dashboard_result(
    state: DashboardState,
    token: int,
    orders: list[ClassifiedOrder] | None,
    metrics: DashboardMetrics | None,
    error: str | None,
) -> DashboardState:
    if not is_current(state, token):
        return state
    if error is not None:
        return state.model_copy(update={
            "orders": (),
            "metrics": None,
            "loading": False,
            "error": error,
        })
    known = {order.record.pdf_name for order in orders or []}
    return state.model_copy(update={
        "orders": tuple(orders or ()),
        "metrics": metrics,
        "expanded": state.expanded & known,
        "loading": False,
        "error": None,
    })


def has_card(state: DashboardState, pdf_name: str) -> bool:
    return any(order.record.pdf_name == pdf_name for order in state.orders)


def toggle_card(state: DashboardState, pdf_name: str) -> DashboardState:
    """Flip a loaded card; names not among the loaded orders are ignored."""
    if not has_card(state, pdf_name):
        return state
    if pdf_name in state.expanded:
        return state.model_copy(update={"expanded": state.expanded - {pdf_name}})
    return state.model_copy(update={"expanded": state.expanded | {pdf_name}})


def apply_rules_result(
    state: RulesState,
    token: int,
    rules: list[PromptRule] | None,
    error: str | None,
) -> RulesState:
    if not is_current(state, token):
        return state
    if error is not None:
        return state.model_copy(update={"loading": False, "error": error, "success_message": None})
    return state.model_copy(update={
        "rules": tuple(rules or ()),
        "loading": False,
        "error": None,
        "success_message": None,
    })


def rules_failed(state: RulesState, message: str) -> RulesState:
    return state.model_copy(update={"error": message, "success_message": None})


def rules_succeeded(state: RulesState, message: str) -> RulesState:
    return state.model_copy(update={"error": None, "success_message": message})
