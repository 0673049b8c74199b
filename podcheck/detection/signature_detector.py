"""
Signature detection: text labels fused with the image heuristic.

Text: document-specific label sets win over the generic table. Image: the
external heuristic reports ink on the driver (left) and receiver (right)
side; the per-document mapping turns that into signature types. When both
sources see the same type, confidence = 0.6 * text + 0.4 * image.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from loguru import logger

from podcheck.config.settings import (
    IMAGE_SIGNATURE_WEIGHT,
    TEXT_SIGNATURE_CONFIDENCE,
    TEXT_SIGNATURE_WEIGHT,
)
from podcheck.contracts.document_dto import ImageSignatureResult, SignatureInfo
from podcheck.contracts.enums import DocumentType, SignaturePosition, SignatureType
from podcheck.domain.numbers import sanitize_confidence

GENERIC_SIGNATURE_PATTERNS: Dict[SignatureType, List[str]] = {
    SignatureType.DRIVER: [
        r"driver'?s?\s*signature", r"driver\s*sign", r"signed\s*by\s*driver",
        r"sent\s*by", r"service\s*provider", r"prepared\s*by",
    ],
    SignatureType.RECEIVER: [
        r"receiver'?s?\s*signature", r"receiver\s*sign", r"received\s*by", r"recipient\s*signature",
    ],
    SignatureType.CUSTOMER: [
        r"customer\s*signature", r"customer\s*sign", r"signed\s*by\s*customer", r"received\s*by",
    ],
    SignatureType.SECURITY: [
        r"security\s*signature", r"security\s*sign", r"signed\s*by\s*security",
        r"guard\s*on\s*duty", r"guard\s*signature",
    ],
    SignatureType.WAREHOUSE_STAFF: [
        r"warehouse\s*staff\s*signature", r"warehouse\s*signature", r"warehouse\s*sign",
        r"customer'?s?\s*signature", r"authorized\s*personnel",
    ],
    SignatureType.CARRIER: [
        r"carrier\s*signature", r"carrier\s*sign", r"signed\s*by\s*carrier",
    ],
    SignatureType.STORE_MANAGER: [
        r"store\s*manager\s*signature", r"manager\s*signature", r"store\s*manager\s*sign",
    ],
}

# Label sets that replace the generic table for specific document types
DOCUMENT_SIGNATURE_PATTERNS: Dict[DocumentType, Dict[SignatureType, List[str]]] = {
    DocumentType.LOSCAM_DOCUMENT: {
        SignatureType.DRIVER: [r"sent\s*by", r"sender"],
        SignatureType.CUSTOMER: [r"receiver?\s*b[ye]", r"received\s*by", r"re[cz]eiver"],
    },
}


@dataclass(frozen=True)
class SignatureLayout:
    """Which signature types sit on which side of a document."""
    left: List[SignatureType] = field(default_factory=list)
    right: List[SignatureType] = field(default_factory=list)
    priority: Optional[SignatureType] = None


SIGNATURE_LAYOUTS: Dict[DocumentType, SignatureLayout] = {
    DocumentType.LOSCAM_DOCUMENT: SignatureLayout(
        left=[SignatureType.DRIVER],
        right=[SignatureType.CUSTOMER, SignatureType.RECEIVER],
        priority=SignatureType.CUSTOMER,
    ),
    DocumentType.SHIP_DOCUMENT: SignatureLayout(
        left=[SignatureType.DRIVER, SignatureType.CARRIER],
        right=[SignatureType.SECURITY, SignatureType.WAREHOUSE_STAFF],
        priority=SignatureType.DRIVER,
    ),
    DocumentType.PALLET_NOTIFICATION_LETTER: SignatureLayout(
        left=[SignatureType.DRIVER, SignatureType.CARRIER],
        right=[SignatureType.WAREHOUSE_STAFF],
        priority=SignatureType.WAREHOUSE_STAFF,
    ),
    DocumentType.CUSTOMER_PALLET_RECEIVING: SignatureLayout(
        left=[SignatureType.DRIVER],
        right=[SignatureType.RECEIVER, SignatureType.CUSTOMER],
        priority=SignatureType.RECEIVER,
    ),
    DocumentType.INVOICE: SignatureLayout(priority=SignatureType.RECEIVER),
    DocumentType.RAR: SignatureLayout(
        right=[SignatureType.RECEIVER, SignatureType.STORE_MANAGER],
        priority=SignatureType.RECEIVER,
    ),
    DocumentType.UNKNOWN: SignatureLayout(
        left=[SignatureType.DRIVER],
        right=[SignatureType.RECEIVER],
        priority=SignatureType.RECEIVER,
    ),
}


def fuse_confidence(text_confidence: float, image_confidence: float) -> float:
    """Weighted fusion of text and image confidence for the same signature type."""
    fused = TEXT_SIGNATURE_WEIGHT * sanitize_confidence(text_confidence) + \
        IMAGE_SIGNATURE_WEIGHT * sanitize_confidence(image_confidence)
    return sanitize_confidence(round(fused))


class SignatureDetector:
    """Detects signatures from labels in the text and the image heuristic report."""

    def detect(
        self,
        text: str,
        document_type: DocumentType = DocumentType.UNKNOWN,
        image_result: Optional[ImageSignatureResult] = None,
    ) -> List[SignatureInfo]:
        """
        Args:
            text: Raw OCR text
            document_type: Detected document type
            image_result: Optional report of the image heuristic

        Returns:
            Merged signatures, one per type
        """
        layout = SIGNATURE_LAYOUTS.get(document_type, SIGNATURE_LAYOUTS[DocumentType.UNKNOWN])
        text_signatures = self.detect_from_text(text, document_type)
        image_signatures = self.map_image_result(image_result, layout)
        merged = self.merge(text_signatures, image_signatures)
        return [self._with_position(sig, layout) for sig in merged]

    def detect_from_text(self, text: str, document_type: DocumentType) -> List[SignatureInfo]:
        if not text:
            return []

        specific = DOCUMENT_SIGNATURE_PATTERNS.get(document_type)
        if specific:
            found = self._match_labels(text, specific)
            if found:
                logger.debug(f"[SignatureDetector] {document_type.value} labels: {[s.type.value for s in found]}")
                return found

        return self._match_labels(text, GENERIC_SIGNATURE_PATTERNS)

    @staticmethod
    def _match_labels(text: str, table: Dict[SignatureType, List[str]]) -> List[SignatureInfo]:
        found = []
        for signature_type, patterns in table.items():
            if any(re.search(pattern, text, re.IGNORECASE) for pattern in patterns):
                found.append(SignatureInfo(
                    type=signature_type,
                    present=True,
                    confidence=TEXT_SIGNATURE_CONFIDENCE,
                ))
        return found

    @staticmethod
    def map_image_result(
        image_result: Optional[ImageSignatureResult],
        layout: SignatureLayout,
    ) -> List[SignatureInfo]:
        """Turns left/right ink presence into typed signatures for this layout."""
        if image_result is None or image_result.found <= 0:
            return []

        confidence = sanitize_confidence(image_result.confidence)
        signatures = []
        if image_result.driver_present and layout.left:
            signatures.append(SignatureInfo(
                type=layout.left[0], present=True, confidence=confidence,
                position=SignaturePosition.LEFT,
            ))
        if image_result.receiver_present and layout.priority is not None:
            if all(sig.type != layout.priority for sig in signatures):
                signatures.append(SignatureInfo(
                    type=layout.priority, present=True, confidence=confidence,
                    position=SignaturePosition.RIGHT,
                ))
        return signatures

    @staticmethod
    def merge(text_signatures: List[SignatureInfo], image_signatures: List[SignatureInfo]) -> List[SignatureInfo]:
        image_by_type = {sig.type: sig for sig in image_signatures}
        merged = []
        for sig in text_signatures:
            image_sig = image_by_type.pop(sig.type, None)
            if image_sig is None:
                merged.append(sig)
                continue
            confidence = fuse_confidence(sig.confidence, image_sig.confidence)
            logger.debug(
                f"[SignatureDetector] {sig.type.value}: text {sig.confidence} + image "
                f"{image_sig.confidence} -> {confidence}"
            )
            merged.append(SignatureInfo(
                type=sig.type, present=True, confidence=confidence, position=image_sig.position,
            ))
        merged.extend(image_by_type.values())
        return merged

    @staticmethod
    def _with_position(signature: SignatureInfo, layout: SignatureLayout) -> SignatureInfo:
        if signature.position is not None:
            return signature
        if signature.type in layout.left:
            position = SignaturePosition.LEFT
        elif signature.type in layout.right:
            position = SignaturePosition.RIGHT
        else:
            position = SignaturePosition.UNKNOWN
        return signature.model_copy(update={"position": position})
