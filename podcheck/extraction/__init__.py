"""
Field extraction from raw OCR text.

Regex pattern lists are applied in order; the first match wins.
"""

from .field_extractor import FieldExtractor, extract, extract_int
from .item_extractor import ItemExtractor

__all__ = ["FieldExtractor", "ItemExtractor", "extract", "extract_int"]
