"""
Stamp detection from OCR text.

Each stamp type has one regex. All matches are collected and deduplicated
by type, keeping the most confident one. Two document-type rules then add
stamps that forms usually carry but OCR often fails to transcribe:

- SHIP_DOCUMENT with a dispatch stamp and a warehouse reference but no
  pallet or "no pallet" stamp text -> inferred PALLET stamp (70)
- PALLET_NOTIFICATION_LETTER mentioning "pallet notification" and a
  warehouse but no warehouse stamp text -> inferred WAREHOUSE stamp (75)
"""

import re
from typing import Dict, List, Optional

from loguru import logger

from podcheck.config.settings import (
    INFERRED_PALLET_STAMP_CONFIDENCE,
    INFERRED_WAREHOUSE_STAMP_CONFIDENCE,
    STAMP_MATCH_CONFIDENCE,
)
from podcheck.contracts.document_dto import StampInfo
from podcheck.contracts.enums import DocumentType, StampType
from podcheck.domain.numbers import sanitize_confidence

INFERRED_TEXT = "INFERRED"

# Order matters: NO_PALLET runs before PALLET so "no pallet" is not a pallet stamp
STAMP_PATTERNS: Dict[StampType, str] = {
    StampType.DISPATCH: r"dispatch(?:ed)?(?:\s*stamp)?|shipment\s*document",
    StampType.NO_PALLET: r"\bno[\s\-]*pallets?",
    StampType.PALLET: r"pallet(?:\s*stamp)?|pallet\s*notification",
    StampType.WAREHOUSE: r"warehouse(?:\s*stamp)?",
    StampType.LOSCAM: r"loscam",
    StampType.SECURITY: r"security(?:\s*stamp)?",
    StampType.OTHER: r"stamp",
}

# Text claimed by the key stamp cannot also count as the value stamp
STAMP_EXCLUSIONS: Dict[StampType, StampType] = {
    StampType.PALLET: StampType.NO_PALLET,
}

WAREHOUSE_REFERENCE_PATTERN = r"warehouse|wh\s|warenouse"
PALLET_NOTIFICATION_PATTERN = r"pallet\s*notification"


class StampDetector:
    """Detects stamps in document text."""

    def __init__(self, patterns: Optional[Dict[StampType, str]] = None):
        self.patterns = {
            stamp_type: re.compile(pattern, re.IGNORECASE)
            for stamp_type, pattern in (patterns or STAMP_PATTERNS).items()
        }

    def detect(self, text: str, document_type: DocumentType = DocumentType.UNKNOWN) -> List[StampInfo]:
        """
        Args:
            text: Raw OCR text
            document_type: Detected type, enables the inference rules

        Returns:
            One StampInfo per stamp type, highest confidence kept
        """
        if not text:
            return []

        found: Dict[StampType, StampInfo] = {}
        claimed: Dict[StampType, List[tuple]] = {}

        for stamp_type, pattern in self.patterns.items():
            spans = []
            excluded = claimed.get(STAMP_EXCLUSIONS.get(stamp_type), [])
            for match in pattern.finditer(text):
                if any(start <= match.start() < end for start, end in excluded):
                    continue
                spans.append(match.span())
                self._keep_best(
                    found,
                    StampInfo(type=stamp_type, matched_text=match.group(0), confidence=STAMP_MATCH_CONFIDENCE),
                )
            claimed[stamp_type] = spans

        self._apply_inference_rules(found, text, document_type)

        stamps = list(found.values())
        logger.debug(f"[StampDetector] {document_type.value}: {[s.type.value for s in stamps]}")
        return stamps

    @staticmethod
    def _keep_best(found: Dict[StampType, StampInfo], stamp: StampInfo) -> None:
        current = found.get(stamp.type)
        if current is None or stamp.confidence > current.confidence:
            found[stamp.type] = stamp

    @staticmethod
    def _apply_inference_rules(found: Dict[StampType, StampInfo], text: str, document_type: DocumentType) -> None:
        has_warehouse_reference = (
            StampType.WAREHOUSE in found
            or re.search(WAREHOUSE_REFERENCE_PATTERN, text, re.IGNORECASE) is not None
        )

        if (
            document_type == DocumentType.SHIP_DOCUMENT
            and StampType.DISPATCH in found
            and has_warehouse_reference
            and StampType.PALLET not in found
            and StampType.NO_PALLET not in found
        ):
            logger.info("[StampDetector] Ship document: dispatch + warehouse -> inferred PALLET stamp")
            found[StampType.PALLET] = StampInfo(
                type=StampType.PALLET,
                matched_text=INFERRED_TEXT,
                confidence=sanitize_confidence(INFERRED_PALLET_STAMP_CONFIDENCE),
            )

        if (
            document_type == DocumentType.PALLET_NOTIFICATION_LETTER
            and re.search(PALLET_NOTIFICATION_PATTERN, text, re.IGNORECASE)
            and re.search(WAREHOUSE_REFERENCE_PATTERN, text, re.IGNORECASE)
            and StampType.WAREHOUSE not in found
        ):
            logger.info("[StampDetector] Pallet notification + warehouse reference -> inferred WAREHOUSE stamp")
            found[StampType.WAREHOUSE] = StampInfo(
                type=StampType.WAREHOUSE,
                matched_text=INFERRED_TEXT,
                confidence=sanitize_confidence(INFERRED_WAREHOUSE_STAMP_CONFIDENCE),
            )
