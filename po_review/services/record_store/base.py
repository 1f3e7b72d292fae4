from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo

from po_review.core.classification import has_error
from po_review.core.prompt_rule import PromptRule
from po_review.core.purchase_order import PurchaseOrderRecord
from po_review.core.store_result import StoreResult


def viewer_timezone(name: str | None) -> tzinfo:
    """Resolve an IANA zone name; None means the server's local zone."""
    if name:
        return ZoneInfo(name)
    return datetime.now().astimezone().tzinfo


def todays_window(tz: tzinfo, now: datetime | None = None) -> tuple[datetime, datetime]:
    """UTC bounds [start, end) of the current calendar day in ``tz``."""
    local_now = (now or datetime.now(timezone.utc)).astimezone(tz)
    start = datetime.combine(local_now.date(), datetime.min.time(), tzinfo=tz)
    end = start + timedelta(days=1)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


class RecordStore(ABC):
    """Gateway to the store holding extracted POs and prompt rules.

    Implementations never raise for store failures: they log and return a
    ``StoreResult`` carrying an ``ErrorDescriptor``. Lookups of a missing id
    return ``data=None`` (or ``False`` for deletes) without an error.
    """

    @abstractmethod
    def fetch_todays_purchase_orders(self) -> StoreResult[list[PurchaseOrderRecord]]:
        """Records created on the viewer's current day, newest first."""
        ...

    @abstractmethod
    def fetch_purchase_order(self, pdf_name: str) -> StoreResult[PurchaseOrderRecord]:
        ...

    @abstractmethod
    def fetch_all_prompt_rules(self) -> StoreResult[list[PromptRule]]:
        """All rules, newest first."""
        ...

    @abstractmethod
    def fetch_prompt_rule(self, rule_id: int) -> StoreResult[PromptRule]:
        ...

    @abstractmethod
    def create_prompt_rule(self, text: str) -> StoreResult[PromptRule]:
        ...

    @abstractmethod
    def update_prompt_rule(self, rule_id: int, text: str) -> StoreResult[PromptRule]:
        """Replace the rule text and bump ``updated_at``."""
        ...

    @abstractmethod
    def delete_prompt_rule(self, rule_id: int) -> StoreResult[bool]:
        ...

    def fetch_error_purchase_orders(self) -> StoreResult[list[PurchaseOrderRecord]]:
        """Today's records the classifier flags as erroneous."""
        result = self.fetch_todays_purchase_orders()
        if not result.ok:
            return result
        return StoreResult.success([record for record in result.data or [] if has_error(record)])
