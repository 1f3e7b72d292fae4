"""View models served to the dashboard front end.

Rendering is a pure function of the view state; classification results are
taken from the state rather than recomputed.
"""
from datetime import datetime, timezone, tzinfo
from typing import Any

from pydantic import BaseModel, Field

from po_review.core.metrics import DashboardMetrics
from po_review.core.prompt_rule import PromptRule
from po_review.core.purchase_order import LineItem, SalesOrderHeader
from po_review.core.view_state import DashboardState, RulesState
from po_review.core.workflow_state import ClassifiedOrder

NO_TIME = "--:--:--"
NO_ORDERS_MESSAGE = "No purchase orders found for today"
NO_RULES_MESSAGE = "No prompt rules found. Add your first rule to get started."


class MetricTile(BaseModel):
    label: str
    value: str | int
    variant: str = "default"


class SalesOrderDetails(BaseModel):
    customer_name: str
    customer_number: str
    address: str
    city: str
    order_date: str
    amount_excluding_tax: str
    tax_amount: str
    total_including_tax: str | None = None


class LineItemRow(BaseModel):
    item: str
    code: str
    description: str
    po_item_number: str
    quantity: str
    unit_price: str
    unit_of_measure: str
    shipment_date: str | None = None


class PurchaseOrderCard(BaseModel):
    pdf_name: str
    po_number: str | None = None
    status: str
    has_error: bool
    is_expanded: bool
    # Filled only for expanded cards
    details: SalesOrderDetails | None = None
    line_items: list[LineItemRow] = Field(default_factory=list)
    error_details: list[str] = Field(default_factory=list)


class DashboardView(BaseModel):
    metrics: list[MetricTile] = Field(default_factory=list)
    orders: list[PurchaseOrderCard] = Field(default_factory=list)
    empty_message: str | None = None
    loading: bool = False
    error: str | None = None


class PromptRulesView(BaseModel):
    rules: list[PromptRule] = Field(default_factory=list)
    count: int = 0
    empty_message: str | None = None
    success_message: str | None = None
    error: str | None = None


def _text(value: Any, default: str = "") -> str:
    if value is None or value == "":
        return default
    return str(value)


def _money(currency: str | None, amount: Any, default: str = "") -> str:
    return f"{_text(currency)} {_text(amount, default)}".strip()


def format_date(value: datetime) -> str:
    return f"{value:%b} {value.day}, {value.year}"


def format_time(value: datetime | None, tz: tzinfo) -> str:
    if value is None:
        return NO_TIME
    return value.astimezone(tz).strftime("%I:%M:%S %p")


def render_sales_order(header: SalesOrderHeader) -> SalesOrderDetails:
    city = _text(header.sell_to_city).split(",")[-1].strip()
    total_including_tax = None
    if _text(header.total_tax_amount) not in ("", "0") and _text(header.total_amount_including_tax):
        total_including_tax = _money(header.currency_code, header.total_amount_including_tax)
    return SalesOrderDetails(
        customer_name=_text(header.customer_name),
        customer_number=_text(header.customer_number),
        address=_text(header.bill_to_address_line1) or _text(header.ship_to_address_line1),
        city=city,
        order_date=_text(header.order_date),
        amount_excluding_tax=_money(header.currency_code, header.total_amount_excluding_tax),
        tax_amount=_money(header.currency_code, header.total_tax_amount, "0"),
        total_including_tax=total_including_tax,
    )


def render_line_item(line: LineItem) -> LineItemRow:
    return LineItemRow(
        item=_text(line.item_no, "N/A"),
        code=_text(line.code, "N/A"),
        description=_text(line.item_description, "N/A"),
        po_item_number=_text(line.po_item_number, "N/A"),
        quantity=_text(line.quantity, "0"),
        unit_price=_text(line.unit_price, "0"),
        unit_of_measure=_text(line.unit_of_measure_code, "N/A"),
        shipment_date=line.shipment_date or None,
    )


def render_card(order: ClassifiedOrder, is_expanded: bool) -> PurchaseOrderCard:
    record = order.record
    card = PurchaseOrderCard(
        pdf_name=record.pdf_name,
        po_number=record.po_number,
        status="Error" if order.is_error else "Success",
        has_error=order.is_error,
        is_expanded=is_expanded,
    )
    if not is_expanded:
        return card
    if record.header_output is not None:
        card.details = render_sales_order(record.header_output)
    card.line_items = [render_line_item(line) for line in record.line_items_output or []]
    if order.is_error:
        card.error_details = list(order.classification.reasons)
    return card


def render_metrics(metrics: DashboardMetrics, tz: tzinfo, now: datetime) -> list[MetricTile]:
    return [
        MetricTile(label="Today's Date", value=format_date(now.astimezone(tz))),
        MetricTile(label="Entries", value=metrics.entry_count),
        MetricTile(label="Errors", value=metrics.error_count, variant="error"),
        MetricTile(label="Updated", value=format_time(metrics.last_updated, tz)),
    ]


def render_dashboard(state: DashboardState, tz: tzinfo, now: datetime | None = None) -> DashboardView:
    """Render the dashboard; a store failure yields the error and no data."""
    if state.error is not None:
        return DashboardView(loading=state.loading, error=state.error)

    now = now or datetime.now(timezone.utc)
    metrics = state.metrics or DashboardMetrics(entry_count=0, error_count=0)
    return DashboardView(
        metrics=render_metrics(metrics, tz, now),
        orders=[render_card(order, order.record.pdf_name in state.expanded) for order in state.orders],
        empty_message=NO_ORDERS_MESSAGE if not state.orders else None,
        loading=state.loading,
    )


def render_rules(state: RulesState) -> PromptRulesView:
    return PromptRulesView(
        rules=list(state.rules),
        count=len(state.rules),
        empty_message=NO_RULES_MESSAGE if not state.rules else None,
        success_message=state.success_message,
        error=state.error,
    )
