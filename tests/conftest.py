"""
Shared fixtures: OCR texts of a typical Super8 delivery and document builders.
"""

import pytest

from podcheck.contracts import (
    ClientValidationConfig,
    DeliveryItem,
    Document,
    DocumentClassification,
    DocumentType,
)


INVOICE_TEXT = """SALES INVOICE
Invoice No: INV-2024-0456
Invoice Date: 01/15/2024
Bill To: Super8 Supermarket Inc.
PO Number: 4500012345
Total Amount: 15,600.00
"""

RAR_TEXT = """RECEIVING AND ACKNOWLEDGMENT RECEIPT
PO Number: 4500012345
Received by: Store Receiver
Total Cases: 120
"""

SHIP_TEXT_NO_PALLET = """SHIPMENT DOCUMENT
Dispatched from: Cavite Distribution Center
Carrier: FastHaul Logistics
Driver: Juan Dela Cruz
NO PALLET
"""

INVOICE_ITEMS = [
    DeliveryItem(item_code="A10023", description="Corned Beef 150g", quantity=50),
    DeliveryItem(item_code="B20045", description="Sardines 155g", quantity=70),
]


@pytest.fixture
def invoice_text():
    return INVOICE_TEXT


@pytest.fixture
def rar_text():
    return RAR_TEXT


@pytest.fixture
def ship_text():
    return SHIP_TEXT_NO_PALLET


@pytest.fixture
def invoice_items():
    return list(INVOICE_ITEMS)


@pytest.fixture
def make_document():
    """
    Fixture: builder for already classified documents.

    Used by tests that skip the classifier and detector.
    """
    def _make(doc_id, doc_type=None, raw_text="", ocr_confidence=95.0, **kwargs):
        classification = None
        if doc_type is not None:
            classification = DocumentClassification(detected_type=doc_type, confidence=80.0)
        return Document(
            id=doc_id,
            raw_text=raw_text,
            ocr_confidence=ocr_confidence,
            classification=classification,
            **kwargs,
        )
    return _make


@pytest.fixture
def invoice_and_rar(make_document, invoice_items):
    """Invoice and RAR with matching PO numbers and 120 cases each."""
    invoice = make_document("inv-1", DocumentType.INVOICE, INVOICE_TEXT, items=invoice_items)
    rar = make_document("rar-1", DocumentType.RAR, RAR_TEXT, items=invoice_items)
    return invoice, rar


@pytest.fixture
def invoice_only_config():
    """Client that only compares Invoice against RAR."""
    return ClientValidationConfig(
        client_id="acme",
        document_completeness={
            "require_pallet_notification_letter": False,
            "require_loscam_document": False,
            "require_customer_pallet_receiving": False,
            "require_ship_document": False,
        },
        pallet_validation={"enabled": False},
        ship_document_validation={"enabled": False},
        invoice_validation={"require_item_level_match": False},
    )
