"""
DTO contracts of the podcheck engine.

All contracts use Pydantic v2.

- document_dto: Document input and per-document outputs
- delivery_dto: Delivery, document references, completeness
- checklist_dto: check items and the derived checklist
- client_config_dto: per-client validation rules
"""

from .enums import (
    CaseTotalSource,
    CheckStatus,
    DeliveryStatus,
    DocumentType,
    IssueSeverity,
    OverallStatus,
    PALLET_DOCUMENT_TYPES,
    PalletScenario,
    PalletScenarioMode,
    SignaturePosition,
    SignatureType,
    StampType,
)
from .document_dto import (
    AlternativeType,
    DeliveryItem,
    Document,
    DocumentClassification,
    ImageSignatureResult,
    ManualOverride,
    SignatureInfo,
    SignatureRegion,
    StampDetection,
    StampInfo,
)
from .checklist_dto import DeliveryValidationChecklist, ValidationCheckItem, ValidationIssue
from .delivery_dto import (
    Delivery,
    DeliveryDocumentRef,
    DocumentCompletenessResult,
    ProcessingInfo,
)
from .client_config_dto import (
    ClientValidationConfig,
    CrossDocumentValidationRules,
    DocumentCompletenessRules,
    ExtractionPatterns,
    InvoiceValidationRules,
    PalletValidationRules,
    ShipDocumentValidationRules,
)

__all__ = [
    # Enums
    "CaseTotalSource",
    "CheckStatus",
    "DeliveryStatus",
    "DocumentType",
    "IssueSeverity",
    "OverallStatus",
    "PALLET_DOCUMENT_TYPES",
    "PalletScenario",
    "PalletScenarioMode",
    "SignaturePosition",
    "SignatureType",
    "StampType",
    # Documents
    "AlternativeType",
    "DeliveryItem",
    "Document",
    "DocumentClassification",
    "ImageSignatureResult",
    "ManualOverride",
    "SignatureInfo",
    "SignatureRegion",
    "StampDetection",
    "StampInfo",
    # Checklist
    "DeliveryValidationChecklist",
    "ValidationCheckItem",
    "ValidationIssue",
    # Delivery
    "Delivery",
    "DeliveryDocumentRef",
    "DocumentCompletenessResult",
    "ProcessingInfo",
    # Client config
    "ClientValidationConfig",
    "CrossDocumentValidationRules",
    "DocumentCompletenessRules",
    "ExtractionPatterns",
    "InvoiceValidationRules",
    "PalletValidationRules",
    "ShipDocumentValidationRules",
]
