"""
Case total sourcing with the numeric fallback policy.

The sum of parsed line items is preferred, unless it is unreliable:
- fewer than 2 items
- OCR confidence below 60
- item sum above 500

In those cases a summary line ("Total Cases: 120") is used when one is
found. The chosen source is always recorded.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger

from podcheck.config.settings import ITEM_SUM_CEILING, LOW_OCR_CONFIDENCE, MIN_ITEMS_FOR_ITEM_SUM
from podcheck.contracts.document_dto import DeliveryItem, Document
from podcheck.contracts.enums import CaseTotalSource
from podcheck.extraction.field_extractor import FieldExtractor
from podcheck.extraction.item_extractor import ItemExtractor


@dataclass
class CaseTotal:
    """Total case count of one document and where it came from."""
    value: int
    source: CaseTotalSource
    ocr_confidence: float
    items: List[DeliveryItem] = field(default_factory=list)
    fallback_reason: Optional[str] = None

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def source_label(self) -> str:
        return "item sum" if self.source == CaseTotalSource.ITEM_SUM else "summary extraction"

    def to_dict(self) -> dict:
        return {
            "value": self.value,
            "source": self.source.value,
            "item_count": self.item_count,
            "ocr_confidence": self.ocr_confidence,
            "fallback_reason": self.fallback_reason,
        }


class CaseTotalResolver:
    """Resolves the total case count of a document."""

    def __init__(
        self,
        field_extractor: Optional[FieldExtractor] = None,
        item_extractor: Optional[ItemExtractor] = None,
    ):
        self.field_extractor = field_extractor or FieldExtractor()
        self.item_extractor = item_extractor or ItemExtractor()

    def items_of(self, document: Document) -> List[DeliveryItem]:
        if document.items:
            return list(document.items)
        return self.item_extractor.extract(document.raw_text)

    def resolve(self, document: Document) -> CaseTotal:
        items = self.items_of(document)
        item_sum = int(sum(item.quantity for item in items))
        reason = self.fallback_reason(len(items), document.ocr_confidence, item_sum)

        if reason is not None:
            summary = self.field_extractor.extract_summary_total_cases(document.raw_text)
            if summary is not None:
                logger.info(
                    f"[CaseTotalResolver] {document.id}: summary total {summary} "
                    f"instead of item sum {item_sum} ({reason})"
                )
                return CaseTotal(
                    value=summary,
                    source=CaseTotalSource.SUMMARY,
                    ocr_confidence=document.ocr_confidence,
                    items=items,
                    fallback_reason=reason,
                )
            logger.warning(
                f"[CaseTotalResolver] {document.id}: item sum unreliable ({reason}) "
                f"and no summary total found, keeping {item_sum}"
            )

        return CaseTotal(
            value=item_sum,
            source=CaseTotalSource.ITEM_SUM,
            ocr_confidence=document.ocr_confidence,
            items=items,
            fallback_reason=reason,
        )

    @staticmethod
    def fallback_reason(item_count: int, ocr_confidence: float, item_sum: float) -> Optional[str]:
        if item_count < MIN_ITEMS_FOR_ITEM_SUM:
            return "too few items"
        if ocr_confidence < LOW_OCR_CONFIDENCE:
            return "low OCR confidence"
        if item_sum > ITEM_SUM_CEILING:
            return "implausible item sum"
        return None
