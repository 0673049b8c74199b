"""
DTO contract: one uploaded document (POD) and what the engine derives from it.

Input side: raw OCR text, OCR confidence, optional image signature report
and optional manual override. Output side: DocumentClassification and
StampDetection.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from podcheck.contracts.enums import (
    DocumentType,
    SignaturePosition,
    SignatureType,
    StampType,
)
from podcheck.domain.numbers import sanitize_confidence


class SignatureRegion(BaseModel):
    """Region of the page where the image heuristic saw ink."""
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0
    side: SignaturePosition = SignaturePosition.UNKNOWN


class ImageSignatureResult(BaseModel):
    """Signature report produced by the external image heuristic."""
    found: int = Field(0, description="Number of signature candidates found")
    driver_present: bool = Field(False, description="Ink found on the driver (left) side")
    receiver_present: bool = Field(False, description="Ink found on the receiver (right) side")
    confidence: float = Field(0.0, description="Heuristic confidence 0..100")
    regions: List[SignatureRegion] = Field(default_factory=list)

    @field_validator("confidence", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_confidence(v)


class ManualOverride(BaseModel):
    """Classification pinned by an operator."""
    type: DocumentType
    reason: str = ""


class StampInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: StampType
    matched_text: str = ""
    confidence: float = 0.0

    @field_validator("confidence", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_confidence(v)


class SignatureInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: SignatureType
    present: bool = True
    confidence: float = 0.0
    position: Optional[SignaturePosition] = None

    @field_validator("confidence", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_confidence(v)


class DeliveryItem(BaseModel):
    """One line item (item code + quantity) parsed from a document."""
    model_config = ConfigDict(frozen=True)

    item_code: str
    description: str = ""
    quantity: int = 0


class AlternativeType(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: DocumentType
    confidence: float


class DocumentClassification(BaseModel):
    """Result of the document classifier."""
    model_config = ConfigDict(frozen=True)

    detected_type: DocumentType = DocumentType.UNKNOWN
    confidence: float = 0.0
    matched_keywords: List[str] = Field(default_factory=list)
    alternative_types: List[AlternativeType] = Field(default_factory=list)
    threshold: float = 0.0
    manually_overridden: bool = False
    override_reason: Optional[str] = None


class StampDetection(BaseModel):
    """Result of the stamp and signature detector."""
    model_config = ConfigDict(frozen=True)

    stamps: List[StampInfo] = Field(default_factory=list)
    signatures: List[SignatureInfo] = Field(default_factory=list)

    def has_stamp(self, stamp_type: StampType) -> bool:
        return any(stamp.type == stamp_type for stamp in self.stamps)

    def has_signature(self, signature_type: SignatureType) -> bool:
        return any(sig.type == signature_type and sig.present for sig in self.signatures)


class Document(BaseModel):
    """
    One physical file of a delivery.

    Created with its OCR output, then filled by the classifier and detector.
    Re-validation re-derives classification, stamps and signatures instead of
    appending to them.
    """
    id: str
    file_name: Optional[str] = None
    raw_text: str = ""
    ocr_confidence: float = Field(100.0, description="OCR confidence 0..100")
    image_signature_result: Optional[ImageSignatureResult] = None
    manual_override: Optional[ManualOverride] = None
    items: List[DeliveryItem] = Field(
        default_factory=list,
        description="Line items from an upstream parser; parsed from raw_text when empty",
    )
    page_count: Optional[int] = None

    classification: Optional[DocumentClassification] = None
    stamps: List[StampInfo] = Field(default_factory=list)
    signatures: List[SignatureInfo] = Field(default_factory=list)

    @field_validator("ocr_confidence", mode="before")
    @classmethod
    def sanitize_ocr_confidence(cls, v):
        return sanitize_confidence(v)

    @field_validator("raw_text", mode="before")
    @classmethod
    def none_text_to_empty(cls, v):
        return v or ""

    @property
    def detected_type(self) -> DocumentType:
        if self.classification is None:
            return DocumentType.UNKNOWN
        return self.classification.detected_type

    @property
    def classification_confidence(self) -> float:
        if self.classification is None:
            return 0.0
        return self.classification.confidence

    @property
    def is_overridden(self) -> bool:
        return self.manual_override is not None

    def has_stamp(self, stamp_type: StampType) -> bool:
        return any(stamp.type == stamp_type for stamp in self.stamps)

    def has_signature(self, signature_type: SignatureType) -> bool:
        return any(sig.type == signature_type and sig.present for sig in self.signatures)

    def apply_detection(self, detection: StampDetection) -> None:
        """Replaces stamps and signatures with a fresh detection result."""
        self.stamps = list(detection.stamps)
        self.signatures = list(detection.signatures)

    def reset_derived(self) -> None:
        """Drops everything derived by a previous run. Overrides are kept."""
        if not self.is_overridden:
            self.classification = None
        self.stamps = []
        self.signatures = []
