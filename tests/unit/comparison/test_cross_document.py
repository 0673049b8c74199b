import pytest

from podcheck.comparison import (
    ComparisonOptions,
    calculate_variance_percent,
    compare_documents,
    compare_item_lists,
    compare_po,
    compare_total_cases,
    is_within_variance,
)
from podcheck.contracts import DeliveryItem


def item(code, quantity):
    return DeliveryItem(item_code=code, quantity=quantity)


class TestItemLists:
    """compare_item_lists: every difference reported with both values."""

    @pytest.mark.parametrize("items", [
        [],
        [item("A1", 10)],
        [item("A1", 10), item("B2", 0), item("C3", 999)],
        [item("A1", 10), item("a1", 5)],
    ])
    def test_reflexive_with_zero_tolerance(self, items):
        """Test: a list compared with itself has no discrepancies."""
        assert compare_item_lists(items, items, 0).discrepancies == []

    def test_quantity_mismatch(self):
        result = compare_item_lists([item("A1", 70)], [item("A1", 100)])

        assert len(result.discrepancies) == 1
        discrepancy = result.discrepancies[0]
        assert discrepancy.item_code == "A1"
        assert discrepancy.first_value == 70
        assert discrepancy.second_value == 100
        assert discrepancy.difference == 30
        assert discrepancy.variance_percent == 30.0

    def test_missing_items_on_both_sides(self):
        result = compare_item_lists([item("A1", 5)], [item("B2", 7)])

        messages = {d.item_code: d.message for d in result.discrepancies}
        assert messages == {
            "A1": "Item in first document but not in second",
            "B2": "Item in second document but not in first",
        }

    def test_codes_normalized_and_summed(self):
        """Test: 'a 1' and 'A1' are the same item; quantities add up."""
        result = compare_item_lists([item("a 1", 4), item("A1", 6)], [item("A1", 10)])

        assert result.matched
        assert result.matched_items == 1

    def test_tolerance(self):
        assert compare_item_lists([item("A1", 98)], [item("A1", 100)], 5).matched
        assert not compare_item_lists([item("A1", 90)], [item("A1", 100)], 5).matched


class TestFields:

    def test_po_match_ignores_case_and_spaces(self):
        assert compare_po("po 123", "PO123").matched

    def test_po_missing_on_one_side(self):
        comparison = compare_po("123", None)

        assert not comparison.matched
        assert not comparison.both_present

    def test_total_cases_mismatch(self):
        comparison = compare_total_cases(120, 150)

        assert not comparison.matched
        assert comparison.difference == 30
        assert comparison.variance_percent == 20.0
        assert comparison.to_discrepancy().message == "total_cases mismatch: 120 vs 150"

    def test_zero_tolerance_is_exact(self):
        assert is_within_variance(10, 10, 0)
        assert not is_within_variance(10, 10.0001, 0)

    def test_variance_against_zero(self):
        """Test: a zero second value does not divide by zero."""
        assert calculate_variance_percent(5, 0) > 100


def test_compare_documents(invoice_and_rar):
    """Test: full comparison of two documents that agree."""
    invoice, rar = invoice_and_rar

    result = compare_documents(invoice, rar, ComparisonOptions(allowed_variance_percent=0))

    assert result.matched
    assert result.po.first_value == "4500012345"
    assert result.first_total.value == 120
    assert result.to_dict()["items"]["matched_items"] == 2
