"""
Validation Checklist Builder.

Builds the three checklist sections from processed documents, the
completeness result and the client config:

- A: pallet-related documents, stamps and signatures
- B: ship document stamps, signatures and time-out
- C: invoice pages and invoice vs RAR (PO number, case totals, items)

Items are only appended, never changed. The builder holds no state between
calls, so identical inputs always give identical checklists.
"""

import json
import re
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from podcheck.comparison.cross_document import compare_item_lists, compare_po, compare_total_cases
from podcheck.comparison.totals import CaseTotalResolver
from podcheck.config.settings import DISCREPANCY_SAMPLE_LIMIT, LOW_OCR_CONFIDENCE
from podcheck.contracts.checklist_dto import DeliveryValidationChecklist, ValidationCheckItem
from podcheck.contracts.client_config_dto import ClientValidationConfig
from podcheck.contracts.delivery_dto import DocumentCompletenessResult
from podcheck.contracts.document_dto import Document
from podcheck.contracts.enums import (
    CaseTotalSource,
    CheckStatus,
    DocumentType,
    PALLET_DOCUMENT_TYPES,
    PalletScenario,
    SignatureType,
    StampType,
)
from podcheck.detection.detector import StampSignatureDetector
from podcheck.extraction.field_extractor import FieldExtractor

TIME_OUT_LABEL_PATTERN = r"time[\s\-]?out"


def check_item(
    name: str,
    status: CheckStatus,
    message: str = "",
    details: Optional[Dict[str, Any]] = None,
) -> ValidationCheckItem:
    return ValidationCheckItem(name=name, status=status, message=message, details=details)


def presence_item(name: str, present: bool, found_message: str, missing_message: str) -> ValidationCheckItem:
    if present:
        return check_item(name, CheckStatus.PASSED, found_message)
    return check_item(name, CheckStatus.FAILED, missing_message)


def _first_of_type(documents: Sequence[Document], doc_type: DocumentType) -> Optional[Document]:
    for doc in documents:
        if doc.detected_type == doc_type:
            return doc
    return None


class ChecklistBuilder:
    """Builds a DeliveryValidationChecklist for one client config."""

    def __init__(self, config: ClientValidationConfig, detector: Optional[StampSignatureDetector] = None):
        self.config = config
        self.detector = detector or StampSignatureDetector()
        self.field_extractor = FieldExtractor(config.extraction_patterns)
        self.total_resolver = CaseTotalResolver(field_extractor=self.field_extractor)

    def build(
        self,
        documents: Sequence[Document],
        completeness: DocumentCompletenessResult,
    ) -> DeliveryValidationChecklist:
        checklist = DeliveryValidationChecklist(
            pallet_checks=self.build_pallet_section(documents, completeness),
            ship_document_checks=self.build_ship_document_section(documents, completeness),
            invoice_checks=self.build_invoice_section(documents),
        )
        logger.info(f"[ChecklistBuilder] {checklist.overall_status.value}: {checklist.summary}")
        return checklist

    # =========================================================================
    # SECTION A: PALLET DOCUMENTS
    # =========================================================================
    def build_pallet_section(
        self,
        documents: Sequence[Document],
        completeness: DocumentCompletenessResult,
    ) -> List[ValidationCheckItem]:
        rules = self.config.pallet_validation
        if not rules.enabled:
            logger.debug("[ChecklistBuilder] Pallet validation disabled, section A skipped")
            return []

        notification = _first_of_type(documents, DocumentType.PALLET_NOTIFICATION_LETTER)
        with_pallets = completeness.scenario == PalletScenario.WITH_PALLETS

        if notification is not None:
            a1 = check_item("A1. Is there a Pallet Notification Letter?", CheckStatus.PASSED,
                            "Pallet Notification Letter found")
        elif with_pallets:
            a1 = check_item("A1. Is there a Pallet Notification Letter?", CheckStatus.FAILED,
                            "Pallet Notification Letter missing for a delivery with pallets")
        else:
            a1 = check_item("A1. Is there a Pallet Notification Letter?", CheckStatus.NOT_APPLICABLE,
                            "No pallet scenario")
        section = [a1]

        if not with_pallets:
            section.append(check_item(
                "Pallet validation skipped", CheckStatus.NOT_APPLICABLE,
                "No pallet scenario - pallet validation not required",
            ))
            return section

        loscam = _first_of_type(documents, DocumentType.LOSCAM_DOCUMENT)
        section.append(presence_item(
            "Loscam document is present", loscam is not None,
            "Loscam document found", "Loscam document missing",
        ))
        if loscam is not None:
            if rules.require_loscam_stamp:
                section.append(presence_item(
                    "Loscam document has Loscam stamp", loscam.has_stamp(StampType.LOSCAM),
                    "Loscam stamp detected", "Loscam stamp not found",
                ))
            if rules.require_customer_signature:
                signed = loscam.has_signature(SignatureType.CUSTOMER) or loscam.has_signature(SignatureType.RECEIVER)
                section.append(presence_item(
                    "Loscam document is signed by the customer", signed,
                    "Customer signature detected", "Customer signature not found",
                ))
            if rules.require_driver_signature:
                section.append(presence_item(
                    "Loscam document is signed by the driver", loscam.has_signature(SignatureType.DRIVER),
                    "Driver signature detected", "Driver signature not found",
                ))

        receiving = _first_of_type(documents, DocumentType.CUSTOMER_PALLET_RECEIVING)
        section.append(presence_item(
            "Customer pallet receiving document is present", receiving is not None,
            "Customer pallet receiving document found", "Customer pallet receiving document missing",
        ))

        found = sum(1 for doc_type in PALLET_DOCUMENT_TYPES if _first_of_type(documents, doc_type) is not None)
        section.append(check_item(
            "Total of three (3) pallet-related documents are complete",
            CheckStatus.PASSED if found == len(PALLET_DOCUMENT_TYPES) else CheckStatus.FAILED,
            f"{found}/{len(PALLET_DOCUMENT_TYPES)} pallet-related documents present",
            {"found": found, "required": len(PALLET_DOCUMENT_TYPES)},
        ))

        if notification is not None:
            if rules.require_warehouse_stamp:
                section.append(presence_item(
                    "Pallet Notification Letter has warehouse stamp", notification.has_stamp(StampType.WAREHOUSE),
                    "Warehouse stamp detected", "Warehouse stamp not found",
                ))
            if rules.require_warehouse_signature:
                section.append(presence_item(
                    "Pallet Notification Letter has warehouse signature",
                    notification.has_signature(SignatureType.WAREHOUSE_STAFF),
                    "Warehouse signature detected", "Warehouse signature not found",
                ))
        return section

    # =========================================================================
    # SECTION B: SHIP DOCUMENT
    # =========================================================================
    def build_ship_document_section(
        self,
        documents: Sequence[Document],
        completeness: DocumentCompletenessResult,
    ) -> List[ValidationCheckItem]:
        rules = self.config.ship_document_validation
        if not rules.enabled:
            logger.debug("[ChecklistBuilder] Ship document validation disabled, section B skipped")
            return []

        ship = _first_of_type(documents, DocumentType.SHIP_DOCUMENT)
        inferred = False
        if ship is None and completeness.inferred_ship_document_id is not None:
            ship = next((d for d in documents if d.id == completeness.inferred_ship_document_id), None)
            inferred = ship is not None

        if ship is None:
            return [check_item("B1. Ship Document is present", CheckStatus.FAILED, "Ship Document missing")]

        low_ocr = inferred and ship.ocr_confidence < LOW_OCR_CONFIDENCE
        # Stamps and signatures were detected under UNKNOWN; add the ship document rules
        evidence = self.detector.detect(ship, DocumentType.SHIP_DOCUMENT) if inferred else None

        def has_stamp(stamp_type: StampType) -> bool:
            return ship.has_stamp(stamp_type) or (evidence is not None and evidence.has_stamp(stamp_type))

        def has_signature(signature_type: SignatureType) -> bool:
            return ship.has_signature(signature_type) or (
                evidence is not None and evidence.has_signature(signature_type)
            )

        section = []
        if inferred:
            section.append(check_item(
                "B1. Ship Document is present", CheckStatus.WARNING,
                f"Ship Document inferred from unclassified document {ship.id}",
                {"document_id": ship.id, "ocr_confidence": ship.ocr_confidence},
            ))
        else:
            section.append(check_item("B1. Ship Document is present", CheckStatus.PASSED, "Ship Document found"))

        def ship_check(name: str, passed: bool, found_message: str, missing_message: str) -> ValidationCheckItem:
            if low_ocr:
                return check_item(name, CheckStatus.WARNING,
                                  f"{found_message if passed else missing_message} - unreliable on poor OCR, review manually")
            if passed:
                return check_item(name, CheckStatus.PASSED, found_message)
            if inferred:
                return check_item(name, CheckStatus.WARNING, "Cannot verify on inferred ship document - review manually")
            return check_item(name, CheckStatus.FAILED, missing_message)

        if completeness.scenario == PalletScenario.WITH_PALLETS:
            if low_ocr:
                section.append(check_item(
                    "Note: Document has poor OCR quality", CheckStatus.WARNING,
                    f"OCR confidence: {ship.ocr_confidence:.0f}% - stamp/signature validation may be unreliable",
                ))
            if rules.require_dispatch_stamp:
                section.append(ship_check(
                    "Dispatch stamp is present", has_stamp(StampType.DISPATCH),
                    "Dispatch stamp detected", "Dispatch stamp not found",
                ))
            if rules.require_pallet_stamp:
                section.append(ship_check(
                    "Pallet stamp from dispatch is present", has_stamp(StampType.PALLET),
                    "Pallet stamp detected", "Pallet stamp not found",
                ))
            if rules.require_security_signature:
                section.append(ship_check(
                    "Security signature is present", has_signature(SignatureType.SECURITY),
                    "Security signature detected", "Security signature not found",
                ))
            if rules.require_driver_signature:
                section.append(ship_check(
                    "Driver signature is present", has_signature(SignatureType.DRIVER),
                    "Driver signature detected", "Driver signature not found",
                ))
            if rules.require_time_out_field:
                section.append(self._time_out_item(ship, low_ocr))
        else:
            if rules.require_dispatch_stamp:
                section.append(ship_check(
                    "Dispatch stamp is present", has_stamp(StampType.DISPATCH),
                    "Dispatch stamp detected", "Dispatch stamp not found",
                ))
            if rules.require_no_pallet_stamp:
                section.append(ship_check(
                    '"No Pallet" stamp from dispatch is present', has_stamp(StampType.NO_PALLET),
                    "No Pallet stamp detected", "No Pallet stamp not found",
                ))
            if rules.require_driver_signature:
                section.append(ship_check(
                    "Driver signature is present", has_signature(SignatureType.DRIVER),
                    "Driver signature detected", "Driver signature not found",
                ))
        return section

    def _time_out_item(self, ship: Document, low_ocr: bool) -> ValidationCheckItem:
        name = "Time-out is indicated (bottom-right of ship document)"
        value = self.field_extractor.extract_time_out(ship.raw_text)
        labelled = re.search(TIME_OUT_LABEL_PATTERN, ship.raw_text, re.IGNORECASE) is not None
        if (value or labelled) and not low_ocr:
            message = f"Time-out field detected: {value}" if value else "Time-out field detected"
            return check_item(name, CheckStatus.PASSED, message, {"time_out": value})
        return check_item(name, CheckStatus.WARNING, "Time-out field not clearly visible", {"time_out": value})

    # =========================================================================
    # SECTION C: INVOICE / CROSS-DOCUMENT
    # =========================================================================
    def build_invoice_section(self, documents: Sequence[Document]) -> List[ValidationCheckItem]:
        rules = self.config.invoice_validation
        cross_rules = self.config.cross_document_validation
        if not rules.enabled:
            logger.debug("[ChecklistBuilder] Invoice validation disabled, section C skipped")
            return []

        invoice = _first_of_type(documents, DocumentType.INVOICE)
        rar = _first_of_type(documents, DocumentType.RAR)
        if invoice is None or rar is None:
            return [self._missing_invoice_or_rar_item(documents, invoice is None)]

        section = []
        if rules.require_complete_pages:
            section.append(self._page_count_item(invoice))

        if not (cross_rules.enabled and cross_rules.validate_invoice_rar):
            section.append(check_item(
                "Invoice vs RAR comparison disabled", CheckStatus.NOT_APPLICABLE,
                "Cross-document validation is disabled for this client",
            ))
            return section

        if rules.require_po_match:
            section.append(self._po_item(invoice, rar))

        if rules.require_total_cases_match or rules.require_item_level_match:
            section.extend(self._case_items(invoice, rar))
        return section

    def _missing_invoice_or_rar_item(self, documents: Sequence[Document], invoice_missing: bool) -> ValidationCheckItem:
        missing = "Invoice" if invoice_missing else "RAR"
        unknown = [doc for doc in documents if doc.detected_type == DocumentType.UNKNOWN]
        message = f"Cannot validate - {missing} document missing."
        if unknown:
            quality = [
                {"document_id": doc.id, "ocr_confidence": doc.ocr_confidence, "file_name": doc.file_name or "unknown"}
                for doc in unknown
            ]
            hint = ('"RAR" or "Receiving and Acknowledgment"' if missing == "RAR"
                    else '"Invoice" or "Invoice Number"')
            message += (
                f" Note: {len(unknown)} document(s) classified as UNKNOWN may be the missing {missing}."
                f" OCR quality: {json.dumps(quality)}."
                f" Suggestions: (1) use a manual document type override, (2) upload a clearer scan,"
                f" (3) verify the document contains {hint}."
            )
        return check_item("C. Invoice Validation", CheckStatus.FAILED, message, {
            "missing_document_type": missing,
            "unknown_document_count": len(unknown),
            "unknown_documents": [doc.id for doc in unknown],
        })

    def _page_count_item(self, invoice: Document) -> ValidationCheckItem:
        name = "C. All invoice pages are present (total page count correct)"
        markers = self.field_extractor.extract_page_markers(invoice.raw_text)
        details = {"pages_found": markers.pages_found, "declared_total": markers.declared_total,
                   "page_count": invoice.page_count}
        if markers.declared_total is None:
            return check_item(name, CheckStatus.PASSED, "Invoice pages detected (no page numbering)", details)
        if markers.missing_pages:
            return check_item(name, CheckStatus.FAILED,
                              f"Missing invoice pages: {markers.missing_pages} of {markers.declared_total}", details)
        return check_item(name, CheckStatus.PASSED, f"All {markers.declared_total} invoice pages present", details)

    def _po_item(self, invoice: Document, rar: Document) -> ValidationCheckItem:
        name = "Invoice PO number matches RAR PO number"
        comparison = compare_po(
            self.field_extractor.extract_po_number(invoice.raw_text),
            self.field_extractor.extract_po_number(rar.raw_text),
        )
        invoice_po, rar_po = comparison.first_value, comparison.second_value
        details = {"invoice_po": invoice_po, "rar_po": rar_po}
        if comparison.matched:
            return check_item(name, CheckStatus.PASSED, f"PO numbers match: {invoice_po}", details)
        if comparison.both_present:
            return check_item(name, CheckStatus.FAILED, f"PO mismatch - Invoice: {invoice_po}, RAR: {rar_po}", details)
        return check_item(name, CheckStatus.WARNING, "PO numbers not clearly detected", details)

    def _case_items(self, invoice: Document, rar: Document) -> List[ValidationCheckItem]:
        rules = self.config.invoice_validation
        invoice_total = self.total_resolver.resolve(invoice)
        rar_total = self.total_resolver.resolve(rar)
        comparison = compare_total_cases(invoice_total.value, rar_total.value, rules.allowed_variance_percent)
        both_positive = invoice_total.value > 0 and rar_total.value > 0
        cases_match = comparison.matched and both_positive
        items = []

        if rules.require_total_cases_match:
            name = "Total number of cases on Invoice matches total number of cases on RAR"
            sources = ""
            if CaseTotalSource.SUMMARY in (invoice_total.source, rar_total.source):
                sources = f" (Invoice: {invoice_total.source_label}, RAR: {rar_total.source_label})"
            details = {
                "invoice_total": invoice_total.value,
                "rar_total": rar_total.value,
                "difference": comparison.difference,
                "invoice_source": invoice_total.source_label,
                "rar_source": rar_total.source_label,
                "invoice_ocr": invoice_total.ocr_confidence,
                "rar_ocr": rar_total.ocr_confidence,
            }
            if cases_match:
                items.append(check_item(name, CheckStatus.PASSED,
                                        f"Total cases match: {invoice_total.value}{sources}", details))
            else:
                items.append(check_item(
                    name,
                    CheckStatus.FAILED if both_positive else CheckStatus.WARNING,
                    f"Cases mismatch - Invoice: {invoice_total.value}, RAR: {rar_total.value}{sources}",
                    details,
                ))

        if rules.require_item_level_match:
            name = "Discrepancy details identified (items and quantity differences noted)"
            item_sums = (
                invoice_total.source == CaseTotalSource.ITEM_SUM
                and rar_total.source == CaseTotalSource.ITEM_SUM
            )
            if not cases_match and both_positive and item_sums:
                result = compare_item_lists(invoice_total.items, rar_total.items, rules.allowed_variance_percent)
                allowance = self.config.effective_discrepancy_allowance
                samples = result.discrepancies[:DISCREPANCY_SAMPLE_LIMIT]
                details = {
                    "discrepancy_count": len(result.discrepancies),
                    "allowed_discrepancy_count": allowance,
                    "samples": [d.to_dict() for d in samples],
                }
                if not result.discrepancies:
                    items.append(check_item(name, CheckStatus.PASSED, "No item-level discrepancies", details))
                else:
                    summary = "; ".join(
                        f"{d.item_code or 'Unknown'}: Inv={d.first_value}, RAR={d.second_value}" for d in samples
                    )
                    more = len(result.discrepancies) - DISCREPANCY_SAMPLE_LIMIT
                    if more > 0:
                        summary += f" +{more} more"
                    status = CheckStatus.FAILED if len(result.discrepancies) > allowance else CheckStatus.PASSED
                    items.append(check_item(
                        name, status, f"{len(result.discrepancies)} discrepancies: {summary}", details,
                    ))
            elif not item_sums:
                items.append(check_item(
                    name, CheckStatus.NOT_APPLICABLE,
                    "Not applicable - totals extracted from document summary, not individual items",
                ))
            else:
                items.append(check_item(
                    name, CheckStatus.NOT_APPLICABLE, "Not applicable - cases matched or insufficient data",
                ))
        return items
