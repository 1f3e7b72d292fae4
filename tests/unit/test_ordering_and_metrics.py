"""Unit tests for display ordering and the metrics aggregator."""
from datetime import timedelta
from itertools import permutations

from po_review.core.metrics import summarize
from po_review.core.ordering import order_for_display, order_records
from tests.mocks import AMBIGUOUS, TODAY, make_record


def _healthy(name, minutes=0):
    return make_record(pdf_name=name, created_at=TODAY - timedelta(minutes=minutes))


def _broken(name, minutes=0):
    return make_record(pdf_name=name, header=None, created_at=TODAY - timedelta(minutes=minutes))


class TestOrderForDisplay:
    def test_errors_first(self):
        records = [_healthy("h1"), _broken("e1"), _healthy("h2"), _broken("e2")]
        ordered = order_records(records)
        assert [r.pdf_name for r in ordered] == ["e1", "e2", "h1", "h2"]

    def test_stable_for_all_permutations(self):
        records = [_healthy("h1"), _broken("e1"), _healthy("h2"), _broken("e2"), _healthy("h3")]
        for perm in permutations(records):
            ordered = order_records(list(perm))
            errors_in = [r.pdf_name for r in perm if r.header_output is None]
            healthy_in = [r.pdf_name for r in perm if r.header_output is not None]
            assert [r.pdf_name for r in ordered] == errors_in + healthy_in

    def test_does_not_mutate_input(self):
        records = [_healthy("h1"), _broken("e1")]
        order_records(records)
        assert [r.pdf_name for r in records] == ["h1", "e1"]

    def test_custom_predicate(self):
        assert order_for_display([1, 2, 3, 4], is_error=lambda n: n % 2 == 0) == [2, 4, 1, 3]

    def test_empty(self):
        assert order_records([]) == []


class TestSummarize:
    def test_counts(self):
        records = [
            _healthy("a", minutes=0),
            _broken("b", minutes=5),
            make_record(pdf_name="c", lines=[{"code": AMBIGUOUS}], created_at=TODAY - timedelta(minutes=9)),
        ]
        metrics = summarize(records)
        assert metrics.entry_count == 3
        assert metrics.error_count == 2

    def test_last_updated_is_head_of_fetch_order(self):
        # Deliberately not newest-first: the aggregator must not re-sort.
        records = [_healthy("older", minutes=30), _healthy("newer", minutes=0)]
        metrics = summarize(records)
        assert metrics.last_updated == TODAY - timedelta(minutes=30)

    def test_empty_collection_reports_no_data(self):
        metrics = summarize([])
        assert metrics.entry_count == 0
        assert metrics.error_count == 0
        assert metrics.last_updated is None
        assert metrics.has_data is False
