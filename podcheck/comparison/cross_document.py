"""
Cross-Document Comparator.

Pure utilities to diff two documents' PO numbers, case totals and line
items. Every mismatch is reported with both values and the signed
difference (second - first), never as a bare boolean.

Variance: |a - b| / max(b, eps) * 100. A tolerance of 0 means exact equality.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from podcheck.config.settings import VARIANCE_EPSILON
from podcheck.contracts.document_dto import DeliveryItem


@dataclass
class Discrepancy:
    """One difference between two documents."""
    field: str
    first_value: Any
    second_value: Any
    difference: Optional[float] = None
    variance_percent: Optional[float] = None
    item_code: Optional[str] = None
    message: str = ""

    def to_dict(self) -> dict:
        return {
            "field": self.field,
            "item_code": self.item_code,
            "first_value": self.first_value,
            "second_value": self.second_value,
            "difference": self.difference,
            "variance_percent": self.variance_percent,
            "message": self.message,
        }


@dataclass
class FieldComparison:
    """Comparison of a single field (PO number, total cases)."""
    field: str
    first_value: Any
    second_value: Any
    matched: bool
    difference: Optional[float] = None
    variance_percent: Optional[float] = None

    @property
    def both_present(self) -> bool:
        return self.first_value is not None and self.second_value is not None

    def to_discrepancy(self) -> Optional[Discrepancy]:
        if self.matched:
            return None
        return Discrepancy(
            field=self.field,
            first_value=self.first_value,
            second_value=self.second_value,
            difference=self.difference,
            variance_percent=self.variance_percent,
            message=f"{self.field} mismatch: {self.first_value} vs {self.second_value}",
        )

    def to_dict(self) -> dict:
        return {
            "field": self.field,
            "first_value": self.first_value,
            "second_value": self.second_value,
            "matched": self.matched,
            "difference": self.difference,
            "variance_percent": self.variance_percent,
        }


@dataclass
class ItemComparison:
    """Result of compare_item_lists."""
    discrepancies: List[Discrepancy] = field(default_factory=list)
    matched_items: int = 0
    allowed_variance_percent: float = 0.0

    @property
    def matched(self) -> bool:
        return not self.discrepancies

    def to_dict(self) -> dict:
        return {
            "matched": self.matched,
            "matched_items": self.matched_items,
            "allowed_variance_percent": self.allowed_variance_percent,
            "discrepancies": [d.to_dict() for d in self.discrepancies],
        }


def calculate_variance_percent(first: float, second: float) -> float:
    """|first - second| relative to second, in percent."""
    return abs(first - second) / max(abs(second), VARIANCE_EPSILON) * 100.0


def is_within_variance(first: float, second: float, allowed_variance_percent: float = 0.0) -> bool:
    if allowed_variance_percent <= 0:
        return first == second
    return calculate_variance_percent(first, second) <= allowed_variance_percent


def normalize_identifier(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    normalized = "".join(str(value).split()).upper()
    return normalized or None


def compare_po(first: Optional[str], second: Optional[str]) -> FieldComparison:
    """PO numbers match when both exist and are equal ignoring case and spaces."""
    first_norm = normalize_identifier(first)
    second_norm = normalize_identifier(second)
    matched = first_norm is not None and first_norm == second_norm
    return FieldComparison(field="po_number", first_value=first_norm, second_value=second_norm, matched=matched)


def compare_total_cases(
    first: Optional[float],
    second: Optional[float],
    allowed_variance_percent: float = 0.0,
) -> FieldComparison:
    """Totals match when both exist and are within the allowed variance."""
    if first is None or second is None:
        return FieldComparison(field="total_cases", first_value=first, second_value=second, matched=False)
    return FieldComparison(
        field="total_cases",
        first_value=first,
        second_value=second,
        matched=is_within_variance(first, second, allowed_variance_percent),
        difference=second - first,
        variance_percent=round(calculate_variance_percent(first, second), 2),
    )


def _quantities_by_code(items: Sequence[DeliveryItem]) -> Dict[str, int]:
    quantities: Dict[str, int] = {}
    for item in items:
        code = normalize_identifier(item.item_code)
        if code is None:
            continue
        quantities[code] = quantities.get(code, 0) + item.quantity
    return quantities


def compare_item_lists(
    first: Sequence[DeliveryItem],
    second: Sequence[DeliveryItem],
    allowed_variance_percent: float = 0.0,
) -> ItemComparison:
    """
    Matches items by item code and reports every difference.

    Args:
        first: Items of the first document (e.g. invoice)
        second: Items of the second document (e.g. RAR)
        allowed_variance_percent: Per-item quantity tolerance

    Returns:
        ItemComparison with one discrepancy per unmatched or differing item
    """
    first_quantities = _quantities_by_code(first)
    second_quantities = _quantities_by_code(second)
    result = ItemComparison(allowed_variance_percent=allowed_variance_percent)

    for code, quantity in first_quantities.items():
        if code not in second_quantities:
            result.discrepancies.append(Discrepancy(
                field="item", item_code=code, first_value=quantity, second_value=None,
                difference=-quantity, message="Item in first document but not in second",
            ))
            continue
        other = second_quantities[code]
        if is_within_variance(quantity, other, allowed_variance_percent):
            result.matched_items += 1
            continue
        variance = round(calculate_variance_percent(quantity, other), 2)
        result.discrepancies.append(Discrepancy(
            field="item", item_code=code, first_value=quantity, second_value=other,
            difference=other - quantity, variance_percent=variance,
            message=f"Quantity mismatch ({variance}% variance)",
        ))

    for code, quantity in second_quantities.items():
        if code not in first_quantities:
            result.discrepancies.append(Discrepancy(
                field="item", item_code=code, first_value=None, second_value=quantity,
                difference=quantity, message="Item in second document but not in first",
            ))

    logger.debug(
        f"[CrossDocumentComparator] Items: {result.matched_items} matched, "
        f"{len(result.discrepancies)} discrepancies (tolerance {allowed_variance_percent}%)"
    )
    return result
