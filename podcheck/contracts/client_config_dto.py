"""
DTO for per-client validation configuration.

Every toggle is an explicit field. The model is frozen: one validation run
always sees the same config.
"""

import re
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from podcheck.contracts.enums import PalletScenarioMode


class DocumentCompletenessRules(BaseModel):
    """Which document types a complete delivery must contain."""
    model_config = ConfigDict(frozen=True)

    require_pallet_notification_letter: bool = True
    require_loscam_document: bool = True
    require_customer_pallet_receiving: bool = True
    require_ship_document: bool = True
    require_invoice: bool = True
    require_rar: bool = True
    pallet_scenario: PalletScenarioMode = PalletScenarioMode.AUTO_DETECT


class PalletValidationRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    require_warehouse_stamp: bool = True
    require_warehouse_signature: bool = True
    require_customer_signature: bool = True
    require_driver_signature: bool = False
    require_loscam_stamp: bool = False


class ShipDocumentValidationRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    require_dispatch_stamp: bool = True
    require_pallet_stamp: bool = True
    require_no_pallet_stamp: bool = True
    require_security_signature: bool = True
    require_time_out_field: bool = True
    require_driver_signature: bool = False


class InvoiceValidationRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    require_complete_pages: bool = True
    require_po_match: bool = True
    require_total_cases_match: bool = True
    allowed_variance_percent: float = Field(0.0, description="Per-item quantity tolerance, 0..100")
    require_item_level_match: bool = True

    @field_validator("allowed_variance_percent")
    @classmethod
    def validate_variance(cls, v):
        if not 0 <= v <= 100:
            raise ValueError(f"allowed_variance_percent must be within 0..100, got: {v}")
        return v


class CrossDocumentValidationRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    validate_invoice_rar: bool = True
    allowed_discrepancy_count: int = 0
    strict_mode: bool = False

    @field_validator("allowed_discrepancy_count")
    @classmethod
    def validate_discrepancy_count(cls, v):
        if v < 0:
            raise ValueError(f"allowed_discrepancy_count cannot be negative, got: {v}")
        return v


class ExtractionPatterns(BaseModel):
    """
    Client overrides for the field extractor pattern lists.

    An empty list means the built-in patterns are used.
    """
    model_config = ConfigDict(frozen=True)

    po_number: List[str] = Field(default_factory=list)
    total_cases: List[str] = Field(default_factory=list)
    summary_total_cases: List[str] = Field(default_factory=list)
    time_out: List[str] = Field(default_factory=list)

    @field_validator("po_number", "total_cases", "summary_total_cases", "time_out")
    @classmethod
    def validate_patterns(cls, v):
        for pattern in v:
            try:
                compiled = re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid regex '{pattern}': {e}") from e
            if compiled.groups < 1:
                raise ValueError(f"Pattern '{pattern}' needs a capturing group")
        return v


class ClientValidationConfig(BaseModel):
    """Validation rules of one client."""
    model_config = ConfigDict(frozen=True)

    client_id: str = Field(..., description="Normalized (upper case) client identifier")
    client_name: str = ""
    description: str = ""
    is_active: bool = True
    document_completeness: DocumentCompletenessRules = Field(default_factory=DocumentCompletenessRules)
    pallet_validation: PalletValidationRules = Field(default_factory=PalletValidationRules)
    ship_document_validation: ShipDocumentValidationRules = Field(
        default_factory=ShipDocumentValidationRules
    )
    invoice_validation: InvoiceValidationRules = Field(default_factory=InvoiceValidationRules)
    cross_document_validation: CrossDocumentValidationRules = Field(
        default_factory=CrossDocumentValidationRules
    )
    extraction_patterns: ExtractionPatterns = Field(default_factory=ExtractionPatterns)

    @field_validator("client_id")
    @classmethod
    def normalize_client_id(cls, v):
        normalized = v.strip().upper()
        if not normalized:
            raise ValueError("client_id cannot be empty")
        return normalized

    @property
    def effective_discrepancy_allowance(self) -> int:
        """Strict mode tolerates no item discrepancies at all."""
        if self.cross_document_validation.strict_mode:
            return 0
        return self.cross_document_validation.allowed_discrepancy_count
