import logging
from collections.abc import Callable
from datetime import datetime, timezone, tzinfo
from pathlib import Path

import yaml

from po_review.core.prompt_rule import PromptRule
from po_review.core.purchase_order import PurchaseOrderRecord
from po_review.core.store_result import StoreResult
from po_review.services.record_store.base import RecordStore, todays_window

logger = logging.getLogger("po_review.store")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryRecordStore(RecordStore):
    """Inspectable store kept in process memory.

    Used for local runs (optionally seeded from a YAML file) and in tests,
    where ``fail_with`` turns every call into a store failure and
    ``all_calls`` records what was asked of the store.
    """

    def __init__(
        self,
        purchase_orders: list[PurchaseOrderRecord] | None = None,
        prompt_rules: list[PromptRule] | None = None,
        tz: tzinfo = timezone.utc,
        clock: Callable[[], datetime] = _utcnow,
        fail_with: str | None = None,
    ):
        self._purchase_orders = list(purchase_orders or [])
        self._prompt_rules: dict[int, PromptRule] = {rule.id: rule for rule in prompt_rules or []}
        self._next_id = max(self._prompt_rules, default=0) + 1
        self._tz = tz
        self._clock = clock
        self.fail_with = fail_with
        self._calls: list[dict] = []

    @classmethod
    def from_yaml(cls, path: str | Path, **kwargs) -> "InMemoryRecordStore":
        """Seed from a YAML file with ``purchase_orders`` and ``prompt_rules`` lists."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        orders = [PurchaseOrderRecord.model_validate(item) for item in data.get("purchase_orders", [])]
        rules = [PromptRule.model_validate(item) for item in data.get("prompt_rules", [])]
        logger.info(f"Seeded in-memory store from {path}: {len(orders)} orders, {len(rules)} rules")
        return cls(purchase_orders=orders, prompt_rules=rules, **kwargs)

    def _check(self, action: str, **params) -> StoreResult | None:
        self._calls.append({"action": action, **params})
        if self.fail_with:
            logger.error(f"In-memory store failing {action}: {self.fail_with}")
            return StoreResult.failure(self.fail_with)
        return None

    def fetch_todays_purchase_orders(self) -> StoreResult[list[PurchaseOrderRecord]]:
        failed = self._check("fetch_todays_purchase_orders")
        if failed is not None:
            return failed
        start, end = todays_window(self._tz, self._clock())
        todays = [po for po in self._purchase_orders if start <= po.created_at < end]
        todays.sort(key=lambda po: po.created_at, reverse=True)
        return StoreResult.success(todays)

    def fetch_purchase_order(self, pdf_name: str) -> StoreResult[PurchaseOrderRecord]:
        failed = self._check("fetch_purchase_order", pdf_name=pdf_name)
        if failed is not None:
            return failed
        match = next((po for po in self._purchase_orders if po.pdf_name == pdf_name), None)
        return StoreResult(data=match)

    def fetch_all_prompt_rules(self) -> StoreResult[list[PromptRule]]:
        failed = self._check("fetch_all_prompt_rules")
        if failed is not None:
            return failed
        rules = sorted(
            self._prompt_rules.values(),
            key=lambda rule: (rule.created_at or datetime.min.replace(tzinfo=timezone.utc), rule.id),
            reverse=True,
        )
        return StoreResult.success(rules)

    def fetch_prompt_rule(self, rule_id: int) -> StoreResult[PromptRule]:
        failed = self._check("fetch_prompt_rule", rule_id=rule_id)
        if failed is not None:
            return failed
        return StoreResult(data=self._prompt_rules.get(rule_id))

    def create_prompt_rule(self, text: str) -> StoreResult[PromptRule]:
        failed = self._check("create_prompt_rule", text=text)
        if failed is not None:
            return failed
        now = self._clock()
        rule = PromptRule(id=self._next_id, prompt=text, created_at=now, updated_at=now)
        self._prompt_rules[rule.id] = rule
        self._next_id += 1
        return StoreResult.success(rule)

    def update_prompt_rule(self, rule_id: int, text: str) -> StoreResult[PromptRule]:
        failed = self._check("update_prompt_rule", rule_id=rule_id, text=text)
        if failed is not None:
            return failed
        existing = self._prompt_rules.get(rule_id)
        if existing is None:
            return StoreResult(data=None)
        updated = existing.model_copy(update={"prompt": text, "updated_at": self._clock()})
        self._prompt_rules[rule_id] = updated
        return StoreResult.success(updated)

    def delete_prompt_rule(self, rule_id: int) -> StoreResult[bool]:
        failed = self._check("delete_prompt_rule", rule_id=rule_id)
        if failed is not None:
            return failed
        return StoreResult.success(self._prompt_rules.pop(rule_id, None) is not None)

    # --- Inspection API for tests ---

    @property
    def all_calls(self) -> list[dict]:
        return list(self._calls)

    @property
    def prompt_rule_writes(self) -> list[dict]:
        return [
            c for c in self._calls
            if c["action"] in ("create_prompt_rule", "update_prompt_rule", "delete_prompt_rule")
        ]

    def reset(self):
        self._calls.clear()
