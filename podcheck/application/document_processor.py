"""
Per-document processing: classification, then stamp & signature detection.

Works on one document and returns a new result without touching the
document, so documents of a delivery can be processed in parallel.
"""

import time
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from podcheck.classification.document_classifier import DocumentClassifier
from podcheck.contracts.document_dto import Document, DocumentClassification, StampDetection
from podcheck.detection.detector import StampSignatureDetector


@dataclass
class ProcessedDocument:
    """Derived data of one document."""
    document_id: str
    classification: DocumentClassification
    detection: StampDetection
    processing_time_ms: float = 0.0

    def apply_to(self, document: Document) -> None:
        document.classification = self.classification
        document.apply_detection(self.detection)

    def to_dict(self) -> dict:
        return {
            "document_id": self.document_id,
            "classification": self.classification.model_dump(mode="json"),
            "detection": self.detection.model_dump(mode="json"),
            "processing_time_ms": self.processing_time_ms,
        }


class DocumentProcessor:
    """Classifies a document and detects its stamps and signatures."""

    def __init__(
        self,
        classifier: Optional[DocumentClassifier] = None,
        detector: Optional[StampSignatureDetector] = None,
    ):
        self.classifier = classifier or DocumentClassifier()
        self.detector = detector or StampSignatureDetector()

    def process(self, document: Document) -> ProcessedDocument:
        start = time.perf_counter()

        classification = self.classifier.classify_document(document)
        detection = self.detector.detect(document, classification.detected_type)

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug(
            f"[DocumentProcessor] {document.id}: {classification.detected_type.value} "
            f"({classification.confidence:.1f}%), stamps={len(detection.stamps)}, "
            f"signatures={len(detection.signatures)} in {elapsed_ms:.1f}ms"
        )
        return ProcessedDocument(
            document_id=document.id,
            classification=classification,
            detection=detection,
            processing_time_ms=round(elapsed_ms, 2),
        )
