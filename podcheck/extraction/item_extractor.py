"""
Line item extraction from raw OCR text.

Two passes: item-code lines ("SKU-123  Corned Beef 150g  12") anywhere in
the text, then a table parse of the rows below the first header row. Both
results are filtered for headers and OCR garbage and deduplicated.
"""

import re
from typing import List, Optional

from loguru import logger

from podcheck.config.settings import (
    CASE_COUNT_MAX,
    ITEM_DESCRIPTION_MAX_LENGTH,
    ITEM_DESCRIPTION_MIN_LENGTH,
    ITEM_TABLE_SCAN_LIMIT,
    YEAR_LIKE_QUANTITY_RANGE,
)
from podcheck.contracts.document_dto import DeliveryItem


class ItemExtractor:
    """Parses DeliveryItem rows out of invoice / RAR text."""

    ITEM_LINE_PATTERN = re.compile(
        r"^\s*(?:item|sku|code)?[\s:]*([A-Z0-9][A-Z0-9\-]{2,14})\s+(.+?)\s+"
        r"(?:qty|quantity|x)?[\s:]*(\d{1,4})\s*(?:pcs|pc|cs|cases?|units?)?\s*$",
        re.IGNORECASE | re.MULTILINE,
    )
    HEADER_ROW_PATTERN = re.compile(r"item|product|description|qty|quantity|sku|code", re.IGNORECASE)
    CODE_PATTERN = re.compile(r"^[A-Z0-9\-]{3,15}$", re.IGNORECASE)

    HEADER_KEYWORDS = [
        "description", "item", "product", "sku", "code", "qty", "quantity",
        "unit", "price", "amount", "total", "subtotal", "variance", "date",
        "delivery", "invoice", "po number", "customer", "terms", "billing",
        "address", "remarks", "must", "payable", "order",
    ]

    def extract(self, text: str) -> List[DeliveryItem]:
        """
        Args:
            text: Raw OCR text of one document

        Returns:
            Unique, plausible items that carry an item code
        """
        if not text or not text.strip():
            return []

        candidates = self._extract_item_lines(text)
        candidates.extend(self._extract_table_rows(text.splitlines()))

        items = []
        seen = set()
        for item in candidates:
            key = (item.item_code.upper(), item.description)
            if key in seen or self._is_header_or_garbage(item):
                continue
            seen.add(key)
            items.append(item)

        logger.debug(f"[ItemExtractor] Items: {len(items)} valid of {len(candidates)} candidates")
        return items

    def _extract_item_lines(self, text: str) -> List[DeliveryItem]:
        items = []
        for match in self.ITEM_LINE_PATTERN.finditer(text):
            code, description, quantity = match.groups()
            # Codes are alphanumeric identifiers, not plain words
            if not re.search(r"\d", code):
                continue
            items.append(DeliveryItem(
                item_code=code.strip(),
                description=description.strip(),
                quantity=int(quantity),
            ))
        return items

    def _extract_table_rows(self, lines: List[str]) -> List[DeliveryItem]:
        header_index = next(
            (i for i, line in enumerate(lines) if self.HEADER_ROW_PATTERN.search(line)),
            None,
        )
        if header_index is None:
            return []

        items = []
        for line in lines[header_index + 1: header_index + 1 + ITEM_TABLE_SCAN_LIMIT]:
            line = line.strip()
            if len(line) < 3:
                continue
            parts = [p.strip() for p in re.split(r"\s{2,}|\t+", line) if p.strip()]
            if len(parts) < 2:
                continue
            item = self._parse_table_row(parts)
            if item is not None:
                items.append(item)
        return items

    def _parse_table_row(self, parts: List[str]) -> Optional[DeliveryItem]:
        code = None
        description = ""
        quantity = None
        for part in parts:
            if part.isdigit():
                value = int(part)
                if 0 < value <= CASE_COUNT_MAX:
                    quantity = value
            elif self.CODE_PATTERN.match(part) and code is None:
                code = part
            elif len(part) > 3:
                description = part
        if code is None or quantity is None:
            return None
        return DeliveryItem(item_code=code, description=description, quantity=quantity)

    def _is_header_or_garbage(self, item: DeliveryItem) -> bool:
        description = item.description.lower()
        code = item.item_code.lower()
        year_min, year_max = YEAR_LIKE_QUANTITY_RANGE

        if any(kw in description for kw in self.HEADER_KEYWORDS) and len(description) < 50:
            return True
        if year_min <= item.quantity <= year_max or item.quantity > CASE_COUNT_MAX:
            return True
        if any(kw in code for kw in self.HEADER_KEYWORDS):
            return True
        if not ITEM_DESCRIPTION_MIN_LENGTH <= len(description) <= ITEM_DESCRIPTION_MAX_LENGTH:
            return True
        return item.quantity <= 0
