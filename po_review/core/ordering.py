from collections.abc import Callable, Sequence
from typing import TypeVar

from po_review.core.classification import has_error
from po_review.core.purchase_order import PurchaseOrderRecord

T = TypeVar("T")


def order_for_display(
    items: Sequence[T],
    is_error: Callable[[T], bool] = has_error,
) -> list[T]:
    """Move erroneous items ahead of healthy ones.

    ``sorted`` is stable and error status is the only key, so items with the
    same status keep their input order.
    """
    return sorted(items, key=lambda item: not is_error(item))


def order_records(records: Sequence[PurchaseOrderRecord]) -> list[PurchaseOrderRecord]:
    return order_for_display(records)
