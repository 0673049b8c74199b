"""
DTO contract: the validation checklist of a delivery.

Three ordered sections of check items. overall_status and summary are
computed from the sections on every access, they cannot be set.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from podcheck.contracts.enums import CheckStatus, IssueSeverity, OverallStatus
from podcheck.validation.rollup import build_summary, compute_overall_status


class ValidationCheckItem(BaseModel):
    """Atomic unit of the checklist."""
    model_config = ConfigDict(frozen=True)

    name: str
    status: CheckStatus
    message: str = ""
    details: Optional[Dict[str, Any]] = None


class DeliveryValidationChecklist(BaseModel):
    model_config = ConfigDict(frozen=True)

    pallet_checks: List[ValidationCheckItem] = Field(default_factory=list)
    ship_document_checks: List[ValidationCheckItem] = Field(default_factory=list)
    invoice_checks: List[ValidationCheckItem] = Field(default_factory=list)

    @property
    def all_items(self) -> List[ValidationCheckItem]:
        return [*self.pallet_checks, *self.ship_document_checks, *self.invoice_checks]

    @computed_field
    @property
    def overall_status(self) -> OverallStatus:
        return compute_overall_status(self.all_items)

    @computed_field
    @property
    def summary(self) -> str:
        return build_summary(self.all_items)

    def find(self, name: str) -> Optional[ValidationCheckItem]:
        """First item with exactly this name."""
        for item in self.all_items:
            if item.name == name:
                return item
        return None


class ValidationIssue(BaseModel):
    """Structured problem found while validating (missing document, unknown type, ...)."""
    model_config = ConfigDict(frozen=True)

    type: str
    severity: IssueSeverity
    description: str
    field_path: Optional[str] = None
    document_id: Optional[str] = None
