"""Stamp & Signature Detector facade used by the document processor."""

from typing import Optional

from podcheck.contracts.document_dto import Document, StampDetection
from podcheck.contracts.enums import DocumentType
from podcheck.detection.signature_detector import SignatureDetector
from podcheck.detection.stamp_detector import StampDetector


class StampSignatureDetector:
    """Runs stamp and signature detection for one document."""

    def __init__(
        self,
        stamp_detector: Optional[StampDetector] = None,
        signature_detector: Optional[SignatureDetector] = None,
    ):
        self.stamp_detector = stamp_detector or StampDetector()
        self.signature_detector = signature_detector or SignatureDetector()

    def detect(self, document: Document, document_type: Optional[DocumentType] = None) -> StampDetection:
        """
        Args:
            document: Document with raw text and optional image signature report
            document_type: Type to condition the rules on (defaults to the document's own)
        """
        document_type = document_type or document.detected_type
        return StampDetection(
            stamps=self.stamp_detector.detect(document.raw_text, document_type),
            signatures=self.signature_detector.detect(
                document.raw_text, document_type, document.image_signature_result
            ),
        )
