"""Sessions own the view state behind the dashboard and rules views.

Gateway and workflow calls block, so they run in the threadpool; the state
is only read and replaced on the event loop, between awaits.
"""
import logging

import opik
from starlette.concurrency import run_in_threadpool

from po_review.core.prompt_rule import PromptRule, normalize_prompt_text
from po_review.core.store_result import StoreResult
from po_review.core.view_state import (
    DashboardState,
    RulesState,
    apply_dashboard_result,
    apply_rules_result,
    begin_fetch,
    rules_failed,
    rules_succeeded,
    toggle_card,
)
from po_review.services.record_store.base import RecordStore

logger = logging.getLogger("po_review.sessions")


class DashboardSession:
    def __init__(self, workflow):
        self._workflow = workflow
        self._state = DashboardState()

    @property
    def state(self) -> DashboardState:
        return self._state

    @opik.track(name="dashboard_refresh")
    def _run_workflow(self) -> dict:
        return self._workflow.invoke({"trajectory": []})

    async def refresh(self) -> DashboardState:
        self._state, token = begin_fetch(self._state)
        try:
            result = await run_in_threadpool(self._run_workflow)
        except Exception as e:
            logger.exception("Dashboard workflow failed")
            result = {"final_status": "error", "error_message": f"Failed to connect to database: {e}"}

        if result.get("final_status") == "error":
            error = result.get("error_message", "Failed to fetch data")
            self._state = apply_dashboard_result(self._state, token, None, None, error)
        else:
            self._state = apply_dashboard_result(
                self._state,
                token,
                result.get("ordered_orders", []),
                result.get("metrics"),
                None,
            )
        logger.info(
            f"Dashboard refresh {token} finished: status={result.get('final_status')}, "
            f"applied={token == self._state.request_seq}"
        )
        return self._state

    def toggle(self, pdf_name: str) -> DashboardState:
        self._state = toggle_card(self._state, pdf_name)
        return self._state


class RulesSession:
    """Rule management: every successful write is followed by a refetch."""

    def __init__(self, store: RecordStore):
        self._store = store
        self._state = RulesState()

    @property
    def state(self) -> RulesState:
        return self._state

    async def refresh(self) -> RulesState:
        self._state, token = begin_fetch(self._state)
        try:
            result = await run_in_threadpool(self._store.fetch_all_prompt_rules)
        except Exception as e:
            logger.exception("Prompt rule fetch failed")
            result = StoreResult.failure(str(e))
        error = None if result.ok else f"Failed to fetch rules: {result.error.message}"
        self._state = apply_rules_result(self._state, token, result.data, error)
        return self._state

    async def get(self, rule_id: int) -> StoreResult[PromptRule]:
        return await run_in_threadpool(self._store.fetch_prompt_rule, rule_id)

    async def create(self, text: str) -> StoreResult[PromptRule]:
        prompt = normalize_prompt_text(text)
        result = await run_in_threadpool(self._store.create_prompt_rule, prompt)
        return await self._after_write(result, "create", "Rule created successfully")

    async def update(self, rule_id: int, text: str) -> StoreResult[PromptRule]:
        prompt = normalize_prompt_text(text)
        result = await run_in_threadpool(self._store.update_prompt_rule, rule_id, prompt)
        return await self._after_write(result, "update", "Rule updated successfully")

    async def delete(self, rule_id: int) -> StoreResult[bool]:
        result = await run_in_threadpool(self._store.delete_prompt_rule, rule_id)
        return await self._after_write(result, "delete", "Rule deleted successfully")

    async def _after_write(self, result: StoreResult, verb: str, success_message: str) -> StoreResult:
        if not result.ok:
            self._state = rules_failed(self._state, f"Failed to {verb} rule: {result.error.message}")
            return result
        if not result.data:
            # Unknown id: nothing changed, leave the view alone
            return result
        await self.refresh()
        if self._state.error is None:
            self._state = rules_succeeded(self._state, success_message)
        return result
