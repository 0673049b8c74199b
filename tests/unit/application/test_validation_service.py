"""
Unit tests for DeliveryValidationService (end to end with real classifier,
detector and bundled client configs).
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from podcheck.application import DeliveryValidationService, DocumentProcessor, create_validation_service
from podcheck.contracts import (
    CheckStatus,
    Delivery,
    DeliveryItem,
    DeliveryStatus,
    Document,
    DocumentType,
    ManualOverride,
    OverallStatus,
)
from podcheck.domain.exceptions import ClientConfigError, DocumentProcessingError
from podcheck.domain.interfaces import IClientConfigProvider
from podcheck.validation.validators import DefaultValidator, ValidatorRegistry, create_default_registry

TOTAL_CASES_CHECK = "Total number of cases on Invoice matches total number of cases on RAR"


class StaticConfigProvider(IClientConfigProvider):
    """Always returns the same config; raises for client 'BROKEN'."""

    def __init__(self, config):
        self.config = config

    def get_config(self, client_id):
        if client_id == "BROKEN":
            raise ClientConfigError("config store unavailable")
        return self.config

    def list_clients(self):
        return [self.config.client_id]


class SlowProcessor(DocumentProcessor):
    """Counts documents processed at the same time."""

    def __init__(self, delay=0.05):
        super().__init__()
        self.delay = delay
        self.active = 0
        self.max_active = 0
        self._guard = threading.Lock()

    def process(self, document):
        with self._guard:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            time.sleep(self.delay)
            return super().process(document)
        finally:
            with self._guard:
                self.active -= 1


class RecordingValidator(DefaultValidator):
    """Records which documents were already processed when validate() ran."""

    def __init__(self):
        self.seen = []

    def validate(self, delivery, config):
        self.seen.append([doc.classification is not None for doc in delivery.document_list])
        return super().validate(delivery, config)


@pytest.fixture
def service():
    return create_validation_service(max_workers=2)


@pytest.fixture
def documents(invoice_text, rar_text, ship_text, invoice_items):
    """Raw documents (not yet classified) of a delivery without pallets."""
    return [
        Document(id="ship-1", file_name="ship.jpg", raw_text=ship_text, ocr_confidence=92),
        Document(id="inv-1", file_name="invoice.pdf", raw_text=invoice_text, ocr_confidence=95, items=invoice_items),
        Document(id="rar-1", file_name="rar.jpg", raw_text=rar_text, ocr_confidence=95, items=invoice_items),
    ]


class TestEndToEnd:

    def test_invoice_and_rar_only(self, invoice_only_config, invoice_text, rar_text, invoice_items):
        """Test: matching Invoice and RAR, nothing missing -> PASS, 'n/n checks passed'."""
        service = DeliveryValidationService(config_provider=StaticConfigProvider(invoice_only_config))
        delivery = Delivery.from_documents("DEL-1", [
            Document(id="inv", raw_text=invoice_text, ocr_confidence=95, items=invoice_items),
            Document(id="rar", raw_text=rar_text, ocr_confidence=95, items=invoice_items),
        ])

        result = service.validate_delivery(delivery)

        assert result.overall_status == OverallStatus.PASS
        assert result.summary == "3/3 checks passed"
        assert delivery.status == DeliveryStatus.COMPLETED
        assert [ref.detected_type for ref in delivery.documents] == [DocumentType.INVOICE, DocumentType.RAR]

    def test_default_client(self, service, documents):
        delivery = Delivery.from_documents("DEL-2", documents, client_id="unknown-client")

        result = service.validate_delivery(delivery)

        assert result.validator_name == "Default"
        assert result.client_id == "DEFAULT"
        assert result.overall_status == OverallStatus.PASS
        assert delivery.summary == "5/5 checks passed"
        assert delivery.processing.documents_processed == 3

    def test_super8_case_mismatch_fails(self, service, documents):
        """Test: invoice 120 vs RAR 150 at OCR 95% -> critical FAILED -> FAIL."""
        rar = documents[2]
        rar.items = [
            DeliveryItem(item_code="A10023", description="Corned Beef 150g", quantity=50),
            DeliveryItem(item_code="B20045", description="Sardines 155g", quantity=100),
        ]
        delivery = Delivery.from_documents("DEL-3", documents, client_id="super8")

        result = service.validate_delivery(delivery)

        assert result.validator_name == "Super8"
        total = result.checklist.find(TOTAL_CASES_CHECK)
        assert total.status == CheckStatus.FAILED
        assert (total.details["invoice_total"], total.details["rar_total"]) == (120, 150)
        assert delivery.overall_status == OverallStatus.FAIL
        assert any(issue.severity.value == "CRITICAL" for issue in delivery.issues)

    def test_result_serializes(self, service, documents):
        result = service.validate_delivery(Delivery.from_documents("DEL-4", documents))

        data = result.to_dict()
        assert data["overall_status"] == "PASS"
        assert data["scenario"] == "WITHOUT_PALLETS"


class TestFailures:
    """Unexpected errors: delivery recorded as FAIL, exception re-raised."""

    def test_validator_exception_is_recorded_and_reraised(self, documents):
        validator = MagicMock()
        validator.name = "Broken"
        validator.validate.side_effect = RuntimeError("rules engine crashed")
        service = DeliveryValidationService(registry=ValidatorRegistry(default=validator))
        delivery = Delivery.from_documents("DEL-5", documents)

        with pytest.raises(RuntimeError, match="rules engine crashed"):
            service.validate_delivery(delivery)

        assert delivery.status == DeliveryStatus.FAILED
        assert delivery.overall_status == OverallStatus.FAIL
        assert delivery.summary == "Validation failed: rules engine crashed"
        assert delivery.checklist is None
        assert delivery.processing.error == "rules engine crashed"

    def test_document_failure(self, documents):
        processor = DocumentProcessor()
        original = processor.process

        def flaky(document):
            if document.id == "rar-1":
                raise ValueError("OCR payload corrupted")
            return original(document)

        processor.process = flaky
        service = DeliveryValidationService(processor=processor)
        delivery = Delivery.from_documents("DEL-6", documents)

        with pytest.raises(DocumentProcessingError) as exc_info:
            service.validate_delivery(delivery)

        assert exc_info.value.document_id == "rar-1"
        assert delivery.processing.documents_failed == 1
        assert delivery.summary.startswith("Validation failed:")

    def test_batch_continues_past_failures(self, invoice_only_config, documents):
        service = DeliveryValidationService(
            config_provider=StaticConfigProvider(invoice_only_config),
            registry=create_default_registry(),
        )
        good = Delivery.from_documents("DEL-7", documents)
        bad = Delivery.from_documents("DEL-8", [Document(id="x", raw_text="INVOICE")], client_id="BROKEN")

        batch = service.validate_batch([bad, good])

        assert list(batch.results) == ["DEL-7"]
        assert "config store unavailable" in batch.failures["DEL-8"]
        assert bad.status == DeliveryStatus.FAILED


class TestRevalidation:

    def test_revalidate_rederives_without_duplicates(self, service, documents):
        delivery = Delivery.from_documents("DEL-9", documents)
        service.validate_delivery(delivery)
        stamps_before = list(documents[0].stamps)

        result = service.revalidate_delivery(delivery)

        assert documents[0].stamps == stamps_before
        assert result.overall_status == OverallStatus.PASS

    def test_revalidate_picks_up_corrections(self, service, documents):
        """Test: an operator override applied after a run is used on revalidation."""
        documents[0].raw_text = "smudged scan"
        delivery = Delivery.from_documents("DEL-10", documents)
        first = service.validate_delivery(delivery)
        assert first.checklist.find("B1. Ship Document is present").status == CheckStatus.FAILED

        documents[0].manual_override = ManualOverride(type=DocumentType.SHIP_DOCUMENT, reason="checked by operator")
        second = service.revalidate_delivery(delivery)

        assert delivery.documents[0].detected_type == DocumentType.SHIP_DOCUMENT
        assert second.checklist.find("B1. Ship Document is present").status == CheckStatus.PASSED

    def test_revalidate_follows_changed_override(self, service, documents):
        """Test: an override corrected between runs replaces the previous one."""
        invoice = documents[1]
        invoice.manual_override = ManualOverride(type=DocumentType.RAR, reason="combined invoice/RAR")
        delivery = Delivery.from_documents("DEL-11", documents)
        service.validate_delivery(delivery)
        assert delivery.documents[1].detected_type == DocumentType.RAR

        invoice.manual_override = ManualOverride(type=DocumentType.INVOICE, reason="operator correction")
        result = service.revalidate_delivery(delivery)

        assert invoice.detected_type == DocumentType.INVOICE
        assert invoice.classification.override_reason == "operator correction"
        assert delivery.documents[1].detected_type == DocumentType.INVOICE
        assert result.overall_status == OverallStatus.PASS


class TestConcurrency:
    """Per-delivery serialization and the fan-in barrier."""

    def test_runs_of_same_delivery_do_not_overlap(self, documents):
        processor = SlowProcessor()
        service = DeliveryValidationService(processor=processor, max_workers=1)
        delivery = Delivery.from_documents("DEL-12", documents)

        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = [pool.submit(service.validate_delivery, delivery) for _ in range(2)]
            results = [future.result() for future in futures]

        # One worker per run: overlapping runs would process two documents at once
        assert processor.max_active == 1
        assert [r.overall_status for r in results] == [OverallStatus.PASS, OverallStatus.PASS]
        assert service._locks == {}

    def test_validator_waits_for_all_documents(self, documents):
        validator = RecordingValidator()
        service = DeliveryValidationService(
            registry=ValidatorRegistry(default=validator),
            processor=SlowProcessor(),
            max_workers=3,
        )

        service.validate_delivery(Delivery.from_documents("DEL-13", documents))

        assert validator.seen == [[True, True, True]]

    def test_lock_released_after_failure(self, documents):
        validator = MagicMock()
        validator.name = "Broken"
        validator.validate.side_effect = RuntimeError("rules engine crashed")
        service = DeliveryValidationService(registry=ValidatorRegistry(default=validator))

        with pytest.raises(RuntimeError):
            service.validate_delivery(Delivery.from_documents("DEL-14", documents))

        assert service._locks == {}
