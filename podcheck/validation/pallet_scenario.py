"""
Pallet-Scenario & Completeness Checker.

Scenario detection is a priority list, first match wins:
1. pallet notification letter present     -> WITH_PALLETS
2. Loscam (pallet exchange) document       -> WITH_PALLETS
3. customer pallet receiving document      -> WITH_PALLETS
4. any PALLET stamp                        -> WITH_PALLETS
5. any NO_PALLET stamp                     -> WITHOUT_PALLETS
6. default                                 -> WITHOUT_PALLETS
"""

from typing import List, Optional, Sequence

from loguru import logger

from podcheck.contracts.checklist_dto import ValidationIssue
from podcheck.contracts.client_config_dto import ClientValidationConfig
from podcheck.contracts.delivery_dto import DocumentCompletenessResult
from podcheck.contracts.document_dto import Document
from podcheck.contracts.enums import (
    DocumentType,
    IssueSeverity,
    PALLET_DOCUMENT_TYPES,
    PalletScenario,
    PalletScenarioMode,
    StampType,
)


def detect_pallet_scenario(documents: Sequence[Document]) -> PalletScenario:
    types = {doc.detected_type for doc in documents}

    for doc_type in PALLET_DOCUMENT_TYPES:
        if doc_type in types:
            logger.debug(f"[PalletScenario] {doc_type.value} present -> WITH_PALLETS")
            return PalletScenario.WITH_PALLETS

    if any(doc.has_stamp(StampType.PALLET) for doc in documents):
        logger.debug("[PalletScenario] PALLET stamp found -> WITH_PALLETS")
        return PalletScenario.WITH_PALLETS

    if any(doc.has_stamp(StampType.NO_PALLET) for doc in documents):
        logger.debug("[PalletScenario] NO_PALLET stamp found -> WITHOUT_PALLETS")
    return PalletScenario.WITHOUT_PALLETS


def resolve_pallet_scenario(documents: Sequence[Document], config: ClientValidationConfig) -> PalletScenario:
    """Client setting first, detection when the client leaves it to AUTO_DETECT."""
    mode = config.document_completeness.pallet_scenario
    if mode == PalletScenarioMode.WITH_PALLETS:
        return PalletScenario.WITH_PALLETS
    if mode == PalletScenarioMode.WITHOUT_PALLETS:
        return PalletScenario.WITHOUT_PALLETS
    return detect_pallet_scenario(documents)


def required_documents(scenario: PalletScenario, config: ClientValidationConfig) -> List[DocumentType]:
    rules = config.document_completeness
    required = []
    if scenario == PalletScenario.WITH_PALLETS:
        if rules.require_pallet_notification_letter:
            required.append(DocumentType.PALLET_NOTIFICATION_LETTER)
        if rules.require_loscam_document:
            required.append(DocumentType.LOSCAM_DOCUMENT)
        if rules.require_customer_pallet_receiving:
            required.append(DocumentType.CUSTOMER_PALLET_RECEIVING)
    if rules.require_ship_document:
        required.append(DocumentType.SHIP_DOCUMENT)
    if rules.require_invoice:
        required.append(DocumentType.INVOICE)
    if rules.require_rar:
        required.append(DocumentType.RAR)
    return required


def _present_types(documents: Sequence[Document]) -> List[DocumentType]:
    present = []
    for doc in documents:
        if doc.detected_type != DocumentType.UNKNOWN and doc.detected_type not in present:
            present.append(doc.detected_type)
    return present


def find_inferable_ship_document(
    documents: Sequence[Document],
    scenario: PalletScenario,
    missing: Sequence[DocumentType],
) -> Optional[Document]:
    """
    The single UNKNOWN document that can stand in for a missing ship document.

    Only when: WITH_PALLETS, exactly one UNKNOWN document, all three pallet
    documents present and the ship document is the only missing type.
    """
    unknown = [doc for doc in documents if doc.detected_type == DocumentType.UNKNOWN]
    present = set(_present_types(documents))
    if (
        scenario == PalletScenario.WITH_PALLETS
        and len(unknown) == 1
        and all(doc_type in present for doc_type in PALLET_DOCUMENT_TYPES)
        and list(missing) == [DocumentType.SHIP_DOCUMENT]
    ):
        return unknown[0]
    return None


def check_completeness(
    documents: Sequence[Document],
    config: ClientValidationConfig,
    allow_ship_document_inference: bool = False,
) -> DocumentCompletenessResult:
    """
    Args:
        documents: Processed documents of the delivery
        config: Client rules
        allow_ship_document_inference: Enables the UNKNOWN -> ship document fallback

    Returns:
        DocumentCompletenessResult with a HIGH issue per missing type
    """
    scenario = resolve_pallet_scenario(documents, config)
    required = required_documents(scenario, config)
    present = _present_types(documents)
    missing = [doc_type for doc_type in required if doc_type not in present]
    extra = [doc_type for doc_type in present if doc_type not in required]
    unknown_ids = [doc.id for doc in documents if doc.detected_type == DocumentType.UNKNOWN]

    inferred_id = None
    if allow_ship_document_inference:
        candidate = find_inferable_ship_document(documents, scenario, missing)
        if candidate is not None:
            inferred_id = candidate.id
            missing = [t for t in missing if t != DocumentType.SHIP_DOCUMENT]
            present.append(DocumentType.SHIP_DOCUMENT)
            logger.warning(
                f"[Completeness] UNKNOWN document {candidate.id} treated as SHIP_DOCUMENT "
                f"(OCR {candidate.ocr_confidence:.0f}%)"
            )

    issues = [
        ValidationIssue(
            type="MISSING_REQUIRED_DOCUMENT",
            severity=IssueSeverity.HIGH,
            description=f"Required document missing: {doc_type.value}",
            field_path="documents",
        )
        for doc_type in missing
    ]
    for doc_id in unknown_ids:
        if doc_id == inferred_id:
            issues.append(ValidationIssue(
                type="SHIP_DOCUMENT_INFERRED",
                severity=IssueSeverity.MEDIUM,
                description="Unclassified document treated as the missing ship document",
                document_id=doc_id,
            ))
        else:
            issues.append(ValidationIssue(
                type="UNCLASSIFIED_DOCUMENT",
                severity=IssueSeverity.MEDIUM,
                description="Document type could not be determined",
                document_id=doc_id,
            ))
    for doc_type in extra:
        issues.append(ValidationIssue(
            type="UNEXPECTED_DOCUMENT",
            severity=IssueSeverity.LOW,
            description=f"Document not required for {scenario.value}: {doc_type.value}",
            field_path="documents",
        ))

    logger.info(
        f"[Completeness] {scenario.value}: missing={[t.value for t in missing]}, "
        f"extra={[t.value for t in extra]}, unknown={len(unknown_ids)}"
    )
    return DocumentCompletenessResult(
        scenario=scenario,
        required=required,
        present=present,
        missing=missing,
        extra=extra,
        unknown_document_ids=unknown_ids,
        inferred_ship_document_id=inferred_id,
        issues=issues,
    )
