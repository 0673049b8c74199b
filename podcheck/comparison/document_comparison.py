"""Full comparison of two documents (PO number, case totals, line items)."""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from podcheck.comparison.cross_document import (
    FieldComparison,
    ItemComparison,
    compare_item_lists,
    compare_po,
    compare_total_cases,
)
from podcheck.comparison.totals import CaseTotal, CaseTotalResolver
from podcheck.contracts.document_dto import Document
from podcheck.extraction.field_extractor import FieldExtractor


@dataclass
class ComparisonOptions:
    allowed_variance_percent: float = 0.0
    compare_po: bool = True
    compare_total_cases: bool = True
    compare_items: bool = True


@dataclass
class DocumentComparisonResult:
    first_document_id: str
    second_document_id: str
    po: Optional[FieldComparison] = None
    total_cases: Optional[FieldComparison] = None
    first_total: Optional[CaseTotal] = None
    second_total: Optional[CaseTotal] = None
    items: Optional[ItemComparison] = None

    @property
    def matched(self) -> bool:
        checks = [c for c in (self.po, self.total_cases, self.items) if c is not None]
        return all(c.matched for c in checks)

    def to_dict(self) -> dict:
        return {
            "first_document_id": self.first_document_id,
            "second_document_id": self.second_document_id,
            "matched": self.matched,
            "po": self.po.to_dict() if self.po else None,
            "total_cases": self.total_cases.to_dict() if self.total_cases else None,
            "first_total": self.first_total.to_dict() if self.first_total else None,
            "second_total": self.second_total.to_dict() if self.second_total else None,
            "items": self.items.to_dict() if self.items else None,
        }


def compare_documents(
    first: Document,
    second: Document,
    options: Optional[ComparisonOptions] = None,
    field_extractor: Optional[FieldExtractor] = None,
) -> DocumentComparisonResult:
    """
    Compares two documents field by field.

    Totals are sourced per document with the fallback policy, so the two
    sides may come from different sources; the comparison still runs.
    """
    options = options or ComparisonOptions()
    field_extractor = field_extractor or FieldExtractor()
    resolver = CaseTotalResolver(field_extractor=field_extractor)
    result = DocumentComparisonResult(first_document_id=first.id, second_document_id=second.id)

    if options.compare_po:
        result.po = compare_po(
            field_extractor.extract_po_number(first.raw_text),
            field_extractor.extract_po_number(second.raw_text),
        )

    if options.compare_total_cases or options.compare_items:
        result.first_total = resolver.resolve(first)
        result.second_total = resolver.resolve(second)

    if options.compare_total_cases:
        result.total_cases = compare_total_cases(
            result.first_total.value, result.second_total.value, options.allowed_variance_percent
        )

    if options.compare_items:
        result.items = compare_item_lists(
            result.first_total.items, result.second_total.items, options.allowed_variance_percent
        )

    logger.info(f"[CrossDocumentComparator] {first.id} vs {second.id}: matched={result.matched}")
    return result
