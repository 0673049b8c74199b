"""
Field Extractor: PO number, case totals, invoice number, dates, time-out.

Every field has an explicit ordered pattern list. extract() returns the
first capturing group of the first pattern that matches; it never votes
across patterns. Numeric fields are bounded: a value outside the plausible
range is "not found" (line numbers, years), never clamped.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

from loguru import logger

from podcheck.config.settings import CASE_COUNT_MAX, CASE_COUNT_MIN
from podcheck.contracts.client_config_dto import ExtractionPatterns

PO_NUMBER_PATTERNS = [
    r"\bP\.?\s?O\.?\s*(?:Number|No\.?|#)\s*:?\s*([A-Z0-9\-]*\d[A-Z0-9\-]*)",
    r"\bPurchase\s*Order\s*(?:Number|No\.?|#)?\s*:?\s*([A-Z0-9\-]*\d[A-Z0-9\-]*)",
    r"\bP\.?O\.?(?![A-Za-z])\s*:?\s*([A-Z0-9\-]*\d[A-Z0-9\-]*)",
    r"\bOrder\s*(?:Number|No\.?|#)?\s*:?\s*([A-Z0-9\-]*\d[A-Z0-9\-]*)",
]

TOTAL_CASES_PATTERNS = [
    r"Total\s*Cases\s*:?\s*(\d+)",
    r"Total\s*Qty\s*:?\s*(\d+)",
    r"Total\s*Quantity\s*:?\s*(\d+)",
    r"\bCases\s*:?\s*(\d+)",
    r"Total\s*:?\s*(\d+)\s*(?:cases|pcs|units)",
]

# Summary lines ("Total Cases: 120") used when line items are unreliable
SUMMARY_TOTAL_CASES_PATTERNS = [
    r"total\s*cases?[\s:]+?(\d{1,4})",
    r"total\s*qty[\s:]+?(\d{1,4})",
    r"total\s*quantity[\s:]+?(\d{1,4})",
    r"grand\s*total[\s:]+?(\d{1,4})",
    r"cases?[\s:]+total[\s:]+?(\d{1,4})",
    r"sum[\s:]+?(\d{1,4})\s*cases?",
]

INVOICE_NUMBER_PATTERNS = [
    r"\bInvoice\s*(?:Number|No\.?|#)\s*:?\s*([A-Z0-9\-]*\d[A-Z0-9\-]*)",
    r"\bInv\.?\s*(?:No\.?|#)?\s*:?\s*([A-Z0-9\-]*\d[A-Z0-9\-]*)",
    r"\bInvoice\s*:?\s*([A-Z0-9\-]*\d[A-Z0-9\-]*)",
]

TIME_OUT_PATTERNS = [
    r"time[\s\-]?out\s*:?\s*(\d{1,2}:\d{2})",
    r"time[\s\-]?out\s*:?\s*(\d{1,2}\s*(?:AM|PM))",
    r"departure\s*time\s*:?\s*(\d{1,2}:\d{2})",
]

# "Page 2 of 3", "Pg. 1/3"
PAGE_MARKER_PATTERN = r"\b(?:page|pg\.?)\s*(\d{1,3})\s*(?:of|/)\s*(\d{1,3})\b"

DATE_PATTERNS = [
    # YYYY-MM-DD / YYYY/MM/DD
    (r"\b(\d{4})[/\-](\d{1,2})[/\-](\d{1,2})\b", ("%Y", "%m", "%d")),
    # MM/DD/YYYY
    (r"\b(\d{1,2})[/\-](\d{1,2})[/\-](\d{4})\b", ("%m", "%d", "%Y")),
    # MM/DD/YY
    (r"\b(\d{1,2})[/\-](\d{1,2})[/\-](\d{2})\b", ("%m", "%d", "%y")),
]


def extract(text: Optional[str], patterns: Sequence[str], flags: int = re.IGNORECASE) -> Optional[str]:
    """
    First capturing group of the first matching pattern.

    Args:
        text: Raw OCR text
        patterns: Ordered regex list, each with at least one group
        flags: re flags (case-insensitive by default)

    Returns:
        Stripped value or None
    """
    if not text:
        return None
    for pattern in patterns:
        match = re.search(pattern, text, flags)
        if match and match.group(1):
            return match.group(1).strip()
    return None


def extract_int(
    text: Optional[str],
    patterns: Sequence[str],
    minimum: int = CASE_COUNT_MIN,
    maximum: int = CASE_COUNT_MAX,
    flags: int = re.IGNORECASE,
) -> Optional[int]:
    """
    Like extract(), but the value must be an integer within [minimum, maximum].

    A pattern whose value is out of range is skipped and the next pattern
    is tried.
    """
    if not text:
        return None
    for pattern in patterns:
        match = re.search(pattern, text, flags)
        if not match:
            continue
        try:
            value = int(match.group(1))
        except (TypeError, ValueError):
            continue
        if minimum <= value <= maximum:
            return value
        logger.trace(f"[FieldExtractor] {value} outside [{minimum}-{maximum}] for '{pattern}'")
    return None


@dataclass
class PageMarkers:
    """Page numbers declared in the text ("Page 1 of 3")."""
    pages_found: List[int]
    declared_total: Optional[int]

    @property
    def missing_pages(self) -> List[int]:
        if not self.declared_total:
            return []
        return [p for p in range(1, self.declared_total + 1) if p not in self.pages_found]


class FieldExtractor:
    """
    Extracts delivery fields from document text.

    Pattern lists default to the module constants; a client config may
    replace any of them.
    """

    def __init__(self, patterns: Optional[ExtractionPatterns] = None):
        patterns = patterns or ExtractionPatterns()
        self.po_number_patterns = patterns.po_number or PO_NUMBER_PATTERNS
        self.total_cases_patterns = patterns.total_cases or TOTAL_CASES_PATTERNS
        self.summary_total_cases_patterns = patterns.summary_total_cases or SUMMARY_TOTAL_CASES_PATTERNS
        self.time_out_patterns = patterns.time_out or TIME_OUT_PATTERNS

    def extract_po_number(self, text: str) -> Optional[str]:
        value = extract(text, self.po_number_patterns)
        return value.upper() if value else None

    def extract_total_cases(self, text: str) -> Optional[int]:
        return extract_int(text, self.total_cases_patterns)

    def extract_summary_total_cases(self, text: str) -> Optional[int]:
        value = extract_int(text, self.summary_total_cases_patterns)
        if value is not None:
            logger.debug(f"[FieldExtractor] Summary total cases: {value}")
        return value

    def extract_invoice_number(self, text: str) -> Optional[str]:
        value = extract(text, INVOICE_NUMBER_PATTERNS)
        return value.upper() if value else None

    def extract_time_out(self, text: str) -> Optional[str]:
        return extract(text, self.time_out_patterns)

    def extract_date(self, text: str) -> Optional[datetime]:
        """First date in the text that parses as a real calendar date."""
        if not text:
            return None
        for pattern, parts in DATE_PATTERNS:
            for match in re.finditer(pattern, text):
                try:
                    return datetime.strptime(" ".join(match.groups()), " ".join(parts))
                except ValueError:
                    logger.trace(f"[FieldExtractor] Not a date: {match.group(0)}")
                    continue
        return None

    def extract_page_markers(self, text: str) -> PageMarkers:
        pages = set()
        declared = None
        for match in re.finditer(PAGE_MARKER_PATTERN, text or "", re.IGNORECASE):
            page, total = int(match.group(1)), int(match.group(2))
            if 1 <= page <= total:
                pages.add(page)
                declared = max(declared or 0, total)
        return PageMarkers(pages_found=sorted(pages), declared_total=declared)
