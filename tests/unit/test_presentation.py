"""Unit tests for the dashboard and rules view renderers."""
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from po_review.core.classification import classify
from po_review.core.metrics import DashboardMetrics
from po_review.core.prompt_rule import PromptRule
from po_review.core.purchase_order import LineItem, SalesOrderHeader
from po_review.core.view_state import DashboardState, RulesState
from po_review.core.workflow_state import ClassifiedOrder
from po_review.presentation import (
    NO_ORDERS_MESSAGE,
    NO_RULES_MESSAGE,
    NO_TIME,
    format_date,
    format_time,
    render_card,
    render_dashboard,
    render_line_item,
    render_rules,
    render_sales_order,
)
from tests.mocks import AMBIGUOUS, TODAY, make_record

UTC = timezone.utc


def _classified(record):
    return ClassifiedOrder(record=record, classification=classify(record))


class TestFormatting:
    def test_format_date(self):
        assert format_date(datetime(2024, 1, 5, tzinfo=UTC)) == "Jan 5, 2024"

    def test_format_time_in_viewer_zone(self):
        assert format_time(TODAY, ZoneInfo("Europe/Amsterdam")) == "01:00:00 PM"

    def test_format_time_without_data(self):
        assert format_time(None, UTC) == NO_TIME


class TestRenderSalesOrder:
    def test_full_header(self):
        header = SalesOrderHeader.model_validate({
            "customerName": "Acme Industrial",
            "customerNumber": "C-1001",
            "billToAddressLine1": "1 Harbour Road",
            "sellToCity": "Unit 4, Rotterdam",
            "orderDate": "2024-01-15",
            "currencyCode": "EUR",
            "totalAmountExcludingTax": "1200.00",
            "totalTaxAmount": "252.00",
            "totalAmountIncludingTax": "1452.00",
        })
        details = render_sales_order(header)
        assert details.customer_name == "Acme Industrial"
        assert details.address == "1 Harbour Road"
        assert details.city == "Rotterdam"
        assert details.amount_excluding_tax == "EUR 1200.00"
        assert details.tax_amount == "EUR 252.00"
        assert details.total_including_tax == "EUR 1452.00"

    def test_address_falls_back_to_ship_to(self):
        header = SalesOrderHeader.model_validate({"shipToAddressLine1": "Dock 7"})
        assert render_sales_order(header).address == "Dock 7"

    def test_no_tax_hides_total_including_tax(self):
        header = SalesOrderHeader.model_validate({
            "currencyCode": "EUR",
            "totalAmountExcludingTax": "100",
            "totalAmountIncludingTax": "100",
        })
        details = render_sales_order(header)
        assert details.tax_amount == "EUR 0"
        assert details.total_including_tax is None


class TestRenderLineItem:
    def test_defaults_for_missing_values(self):
        row = render_line_item(LineItem())
        assert row.item == "N/A"
        assert row.code == "N/A"
        assert row.description == "N/A"
        assert row.quantity == "0"
        assert row.unit_price == "0"
        assert row.shipment_date is None

    def test_values(self):
        row = render_line_item(LineItem.model_validate({"itemNo": "1000", "quantity": 40, "unitprice": 2.5}))
        assert row.item == "1000"
        assert row.quantity == "40"
        assert row.unit_price == "2.5"


class TestRenderCard:
    def test_collapsed_card_has_no_details(self):
        card = render_card(_classified(make_record(pdf_name="po1", po_number="4500")), is_expanded=False)
        assert card.pdf_name == "po1"
        assert card.po_number == "4500"
        assert card.status == "Success"
        assert card.details is None
        assert card.line_items == []

    def test_expanded_error_card_lists_reasons(self):
        record = make_record(pdf_name="po3", lines=[{"itemNo": AMBIGUOUS, "poItemNumber": "5"}])
        card = render_card(_classified(record), is_expanded=True)
        assert card.status == "Error"
        assert card.has_error is True
        assert card.details.customer_name == "Acme"
        assert len(card.line_items) == 1
        assert card.error_details == [
            "1 line item(s) have ambiguous identification",
            'Line with PO item number "5" has identification error',
        ]

    def test_expanded_card_without_header(self):
        card = render_card(_classified(make_record(header=None)), is_expanded=True)
        assert card.details is None
        assert card.error_details == ["Header output missing or invalid"]

    def test_expanded_healthy_card_has_no_error_details(self):
        card = render_card(_classified(make_record()), is_expanded=True)
        assert card.error_details == []


class TestRenderDashboard:
    def test_metric_tiles(self):
        state = DashboardState(
            orders=(_classified(make_record()),),
            metrics=DashboardMetrics(entry_count=1, error_count=0, last_updated=TODAY),
        )
        view = render_dashboard(state, UTC, TODAY)
        assert [(t.label, t.value) for t in view.metrics] == [
            ("Today's Date", "Jan 15, 2024"),
            ("Entries", 1),
            ("Errors", 0),
            ("Updated", "12:00:00 PM"),
        ]
        assert view.metrics[2].variant == "error"
        assert view.empty_message is None

    def test_empty_day(self):
        state = DashboardState(metrics=DashboardMetrics(entry_count=0, error_count=0))
        view = render_dashboard(state, UTC, TODAY)
        assert view.orders == []
        assert view.empty_message == NO_ORDERS_MESSAGE
        assert view.metrics[3].value == NO_TIME

    def test_error_replaces_data(self):
        view = render_dashboard(DashboardState(error="Failed to fetch data: boom"), UTC, TODAY)
        assert view.error == "Failed to fetch data: boom"
        assert view.metrics == []
        assert view.orders == []
        assert view.empty_message is None

    def test_expanded_set_drives_cards(self):
        state = DashboardState(
            orders=(_classified(make_record(pdf_name="a")), _classified(make_record(pdf_name="b"))),
            metrics=DashboardMetrics(entry_count=2, error_count=0, last_updated=TODAY),
            expanded=frozenset({"b"}),
        )
        view = render_dashboard(state, UTC, TODAY)
        assert [c.is_expanded for c in view.orders] == [False, True]


class TestRenderRules:
    def test_rules(self):
        rule = PromptRule(id=1, prompt="Always include tax.", created_at=TODAY, updated_at=TODAY)
        view = render_rules(RulesState(rules=(rule,), success_message="Rule created successfully"))
        assert view.count == 1
        assert view.rules[0].prompt == "Always include tax."
        assert view.empty_message is None
        assert view.success_message == "Rule created successfully"

    def test_no_rules(self):
        view = render_rules(RulesState())
        assert view.count == 0
        assert view.empty_message == NO_RULES_MESSAGE
