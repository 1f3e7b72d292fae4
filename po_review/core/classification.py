"""PO error classification.

Everything here is pure: the same record always yields the same result, so
the batch summary and per-card rendering can call these independently.
"""
from collections.abc import Callable
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, Field

from po_review.core.purchase_order import LineItem, PurchaseOrderRecord

AMBIGUITY_SENTINEL = "Ambiguity in identification"

PLACEHOLDER_STRINGS = {"null", "undefined"}

# Tried in this order. The description accessor prefers itemDescription and
# falls back to poDescription when the line carries no itemDescription.
IDENTIFICATION_ACCESSORS: list[tuple[str, Callable[[LineItem], Any]]] = [
    ("itemNo", lambda line: line.item_no),
    ("code", lambda line: line.code),
    (
        "description",
        lambda line: line.item_description if line.item_description is not None else line.po_description,
    ),
]

# (attribute, message, zero counts as missing)
REQUIRED_HEADER_FIELDS = [
    ("total_amount_excluding_tax", "Total amount excluding tax is missing", True),
    ("customer_name", "Customer name is missing", False),
    ("order_date", "Order date is missing", False),
]


class Classification(BaseModel):
    is_error: bool
    reasons: list[str] = Field(default_factory=list)


def is_blank(value: Any, zero_is_blank: bool = False) -> bool:
    """Return True when an extracted value should be treated as missing.

    None, empty or whitespace-only strings and the placeholders "null" and
    "undefined" are blank. With ``zero_is_blank`` a numeric zero, or a string
    that parses to zero, is blank as well.
    """
    if value is None:
        return True
    if isinstance(value, str):
        text = value.strip()
        if not text or text.lower() in PLACEHOLDER_STRINGS:
            return True
        if zero_is_blank:
            try:
                return Decimal(text) == 0
            except InvalidOperation:
                return False
        return False
    if isinstance(value, bool):
        return False
    if zero_is_blank and isinstance(value, (int, float, Decimal)):
        return value == 0
    return False


def is_ambiguous(line: LineItem) -> bool:
    return any(accessor(line) == AMBIGUITY_SENTINEL for _, accessor in IDENTIFICATION_ACCESSORS)


def ambiguous_lines(record: PurchaseOrderRecord) -> list[LineItem]:
    if record.line_items_output is None:
        return []
    return [line for line in record.line_items_output if is_ambiguous(line)]


def has_error(record: PurchaseOrderRecord) -> bool:
    if record.header_output is None or record.line_items_output is None:
        return True
    if ambiguous_lines(record):
        return True
    header = record.header_output
    return any(
        is_blank(getattr(header, field), zero_is_blank=zero_is_blank)
        for field, _, zero_is_blank in REQUIRED_HEADER_FIELDS
    )


def _identifier(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    if text == "undefined" or not text.strip():
        return None
    return text


def describe_ambiguous_line(line: LineItem) -> str:
    parts = []
    po_item_number = _identifier(line.po_item_number)
    if po_item_number is not None:
        parts.append(f'PO item number "{po_item_number}"')
    po_description = _identifier(line.po_description)
    if po_description is not None:
        parts.append(f'description "{po_description}"')
    if not parts:
        return "Line has identification error (no valid identifiers found)"
    return f"Line with {' and '.join(parts)} has identification error"


def get_error_details(record: PurchaseOrderRecord) -> list[str]:
    """Human-readable reasons, line problems first, then header problems."""
    errors = []

    if record.line_items_output is None:
        errors.append("Lines output missing or invalid")
    else:
        flagged = ambiguous_lines(record)
        if flagged:
            errors.append(f"{len(flagged)} line item(s) have ambiguous identification")
            errors.extend(describe_ambiguous_line(line) for line in flagged)

    if record.header_output is None:
        errors.append("Header output missing or invalid")
    else:
        for field, message, zero_is_blank in REQUIRED_HEADER_FIELDS:
            if is_blank(getattr(record.header_output, field), zero_is_blank=zero_is_blank):
                errors.append(message)

    return errors


def classify(record: PurchaseOrderRecord) -> Classification:
    if not has_error(record):
        return Classification(is_error=False)
    return Classification(is_error=True, reasons=get_error_details(record))
