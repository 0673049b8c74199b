"""Cross-document comparison and case total sourcing."""

from .cross_document import (
    Discrepancy,
    FieldComparison,
    ItemComparison,
    calculate_variance_percent,
    compare_item_lists,
    compare_po,
    compare_total_cases,
    is_within_variance,
)
from .document_comparison import ComparisonOptions, DocumentComparisonResult, compare_documents
from .totals import CaseTotal, CaseTotalResolver

__all__ = [
    "CaseTotal",
    "CaseTotalResolver",
    "ComparisonOptions",
    "Discrepancy",
    "DocumentComparisonResult",
    "FieldComparison",
    "ItemComparison",
    "calculate_variance_percent",
    "compare_documents",
    "compare_item_lists",
    "compare_po",
    "compare_total_cases",
    "is_within_variance",
]
