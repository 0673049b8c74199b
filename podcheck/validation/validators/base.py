"""
Base validator (client policy) for delivery validation.

A validator turns the processed documents of a delivery into a checklist
according to the client's config. Subclasses differ in name, version and
policy switches; the checklist logic itself lives in ChecklistBuilder.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List

from loguru import logger

from podcheck.contracts.checklist_dto import DeliveryValidationChecklist, ValidationIssue
from podcheck.contracts.client_config_dto import ClientValidationConfig
from podcheck.contracts.delivery_dto import Delivery, DocumentCompletenessResult
from podcheck.contracts.enums import CheckStatus, IssueSeverity, OverallStatus
from podcheck.validation.checklist import ChecklistBuilder
from podcheck.validation.pallet_scenario import check_completeness
from podcheck.validation.rollup import is_critical_check


@dataclass
class DeliveryValidationResult:
    """Outcome of one validator run."""
    delivery_id: str
    client_id: str
    validator_name: str
    validator_version: str
    checklist: DeliveryValidationChecklist
    completeness: DocumentCompletenessResult
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def overall_status(self) -> OverallStatus:
        return self.checklist.overall_status

    @property
    def summary(self) -> str:
        return self.checklist.summary

    def to_dict(self) -> dict:
        return {
            "delivery_id": self.delivery_id,
            "client_id": self.client_id,
            "validator_name": self.validator_name,
            "validator_version": self.validator_version,
            "scenario": self.completeness.scenario.value,
            "overall_status": self.overall_status.value,
            "summary": self.summary,
            "checklist": self.checklist.model_dump(mode="json"),
            "completeness": self.completeness.model_dump(mode="json"),
            "issues": [issue.model_dump(mode="json") for issue in self.issues],
        }


class AbstractDeliveryValidator(ABC):
    """Client policy interface: one validate() per delivery."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Validator name (for logging and results)."""
        pass

    @property
    def version(self) -> str:
        return "1.0.0"

    @abstractmethod
    def validate(self, delivery: Delivery, config: ClientValidationConfig) -> DeliveryValidationResult:
        """
        Validates a delivery whose documents are already classified and detected.

        Args:
            delivery: Delivery with processed documents
            config: Client config, fixed for this run

        Returns:
            DeliveryValidationResult with the checklist
        """
        pass


class BaseDeliveryValidator(AbstractDeliveryValidator):
    """Config-driven checklist validation shared by all client policies."""

    # Treat a lone UNKNOWN document as the missing ship document
    ALLOW_SHIP_DOCUMENT_INFERENCE: bool = False

    def validate(self, delivery: Delivery, config: ClientValidationConfig) -> DeliveryValidationResult:
        logger.info(f"[{self.name}Validator] Validating delivery {delivery.id} ({len(delivery.documents)} documents)")
        documents = delivery.document_list

        completeness = check_completeness(documents, config, self.ALLOW_SHIP_DOCUMENT_INFERENCE)
        checklist = ChecklistBuilder(config).build(documents, completeness)
        issues = list(completeness.issues) + self._issues_from_checklist(checklist)

        logger.info(f"[{self.name}Validator] {delivery.id}: {checklist.overall_status.value} ({checklist.summary})")
        return DeliveryValidationResult(
            delivery_id=delivery.id,
            client_id=config.client_id,
            validator_name=self.name,
            validator_version=self.version,
            checklist=checklist,
            completeness=completeness,
            issues=issues,
        )

    @staticmethod
    def _issues_from_checklist(checklist: DeliveryValidationChecklist) -> List[ValidationIssue]:
        issues = []
        for item in checklist.all_items:
            if item.status == CheckStatus.FAILED:
                severity = IssueSeverity.CRITICAL if is_critical_check(item.name) else IssueSeverity.MEDIUM
            elif item.status == CheckStatus.WARNING:
                severity = IssueSeverity.LOW
            else:
                continue
            issues.append(ValidationIssue(
                type="CHECK_" + item.status.value,
                severity=severity,
                description=f"{item.name}: {item.message}",
                field_path="checklist",
            ))
        return issues
