import pytest

from podcheck.contracts import ExtractionPatterns
from podcheck.extraction import FieldExtractor, extract, extract_int


@pytest.fixture
def extractor():
    """Fixture for FieldExtractor with the built-in patterns."""
    return FieldExtractor()


class TestPONumber:
    """PO number extraction."""

    def test_po_number_label(self, extractor, invoice_text):
        """Test: 'PO Number: 4500012345' gives the number."""
        assert extractor.extract_po_number(invoice_text) == "4500012345"

    def test_purchase_order_label(self, extractor):
        """Test: 'Purchase Order #' form, value upper-cased."""
        assert extractor.extract_po_number("Purchase Order # po-77812") == "PO-77812"

    def test_po_without_digits_is_not_found(self, extractor):
        """Test: a label followed by a word is not a PO number."""
        assert extractor.extract_po_number("PO Number: pending") is None

    def test_empty_text(self, extractor):
        assert extractor.extract_po_number("") is None
        assert extractor.extract_po_number(None) is None


class TestTotals:
    """Bounded integer fields."""

    def test_total_cases(self, extractor, rar_text):
        assert extractor.extract_total_cases(rar_text) == 120

    def test_out_of_range_value_is_not_found(self, extractor):
        """Test: a year-sized number is 'not found', never clamped."""
        assert extractor.extract_total_cases("Total Cases: 2024") is None

    def test_out_of_range_pattern_falls_through(self):
        """Test: the next pattern is tried when the first value is out of range."""
        text = "Total Cases: 9999\nQty: 42"
        assert extract_int(text, [r"Total\s*Cases\s*:?\s*(\d+)", r"Qty\s*:?\s*(\d+)"]) == 42

    def test_summary_total(self, extractor):
        assert extractor.extract_summary_total_cases("GRAND TOTAL: 87") == 87


class TestOtherFields:
    """Invoice number, time-out, dates and page markers."""

    def test_invoice_number(self, extractor, invoice_text):
        assert extractor.extract_invoice_number(invoice_text) == "INV-2024-0456"

    def test_time_out(self, extractor):
        assert extractor.extract_time_out("Time-out: 14:35") == "14:35"
        assert extractor.extract_time_out("Time out 3 PM") == "3 PM"

    def test_extract_date_skips_impossible_dates(self, extractor):
        """Test: 13/45/2024 is skipped, the next real date wins."""
        result = extractor.extract_date("Printed 13/45/2024, delivered 01/15/2024")
        assert result is not None
        assert (result.year, result.month, result.day) == (2024, 1, 15)

    def test_page_markers(self, extractor):
        markers = extractor.extract_page_markers("Page 1 of 3\n...\nPage 3 of 3")
        assert markers.pages_found == [1, 3]
        assert markers.declared_total == 3
        assert markers.missing_pages == [2]

    def test_no_page_markers(self, extractor):
        markers = extractor.extract_page_markers("no numbering here")
        assert markers.declared_total is None
        assert markers.missing_pages == []


def test_first_matching_pattern_wins():
    """Test: patterns are ordered, no voting across them."""
    text = "Order No: 111\nPO: 222"
    assert extract(text, [r"PO:\s*(\d+)", r"Order No:\s*(\d+)"]) == "222"


def test_client_patterns_replace_defaults():
    """Test: client override patterns are used instead of the built-in list."""
    extractor = FieldExtractor(ExtractionPatterns(po_number=[r"REF\s*(\d+)"]))
    assert extractor.extract_po_number("REF 555 / PO Number: 4500012345") == "555"
