"""
DTO contract: a delivery (one shipment's document bundle).

The delivery's document list is the only source of truth for which
documents take part in validation. Each reference keeps a copy of its
document's detected type and confidence, refreshed by sync_document_refs().
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from podcheck.contracts.checklist_dto import DeliveryValidationChecklist, ValidationIssue
from podcheck.contracts.document_dto import Document
from podcheck.contracts.enums import (
    DeliveryStatus,
    DocumentType,
    OverallStatus,
    PalletScenario,
)


class DeliveryDocumentRef(BaseModel):
    """Document reference with a denormalized copy of its classification."""
    document: Document
    detected_type: DocumentType = DocumentType.UNKNOWN
    confidence: float = 0.0

    def sync(self) -> None:
        self.detected_type = self.document.detected_type
        self.confidence = self.document.classification_confidence


class DocumentCompletenessResult(BaseModel):
    """Required-vs-present document sets for the detected pallet scenario."""
    scenario: PalletScenario
    required: List[DocumentType] = Field(default_factory=list)
    present: List[DocumentType] = Field(default_factory=list)
    missing: List[DocumentType] = Field(default_factory=list)
    extra: List[DocumentType] = Field(default_factory=list)
    unknown_document_ids: List[str] = Field(default_factory=list)
    inferred_ship_document_id: Optional[str] = None
    issues: List[ValidationIssue] = Field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.missing

    @property
    def ship_document_inferred(self) -> bool:
        return self.inferred_ship_document_id is not None


class ProcessingInfo(BaseModel):
    """Bookkeeping of the last validation run."""
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    processing_time_ms: Optional[float] = None
    documents_processed: int = 0
    documents_failed: int = 0
    validator_name: Optional[str] = None
    validator_version: Optional[str] = None
    error: Optional[str] = None


class Delivery(BaseModel):
    id: str
    reference: str = ""
    client_id: Optional[str] = None
    documents: List[DeliveryDocumentRef] = Field(default_factory=list)

    status: DeliveryStatus = DeliveryStatus.PENDING
    overall_status: Optional[OverallStatus] = None
    summary: Optional[str] = None
    checklist: Optional[DeliveryValidationChecklist] = None
    completeness: Optional[DocumentCompletenessResult] = None
    issues: List[ValidationIssue] = Field(default_factory=list)
    processing: Optional[ProcessingInfo] = None

    @classmethod
    def from_documents(
        cls,
        delivery_id: str,
        documents: List[Document],
        reference: str = "",
        client_id: Optional[str] = None,
    ) -> "Delivery":
        refs = [DeliveryDocumentRef(document=doc) for doc in documents]
        delivery = cls(id=delivery_id, reference=reference, client_id=client_id, documents=refs)
        delivery.sync_document_refs()
        return delivery

    @property
    def document_list(self) -> List[Document]:
        return [ref.document for ref in self.documents]

    def sync_document_refs(self) -> None:
        for ref in self.documents:
            ref.sync()
