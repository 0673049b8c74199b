import pytest

from podcheck.contracts import DocumentType, StampType
from podcheck.detection.stamp_detector import INFERRED_TEXT, StampDetector


@pytest.fixture
def detector():
    return StampDetector()


def stamp_types(stamps):
    return {stamp.type for stamp in stamps}


def test_dispatch_and_no_pallet(detector, ship_text):
    """Test: 'NO PALLET' is a NO_PALLET stamp and never a PALLET stamp."""
    stamps = detector.detect(ship_text, DocumentType.SHIP_DOCUMENT)

    types = stamp_types(stamps)
    assert StampType.DISPATCH in types
    assert StampType.NO_PALLET in types
    assert StampType.PALLET not in types


def test_pallet_stamp_next_to_no_pallet_text(detector):
    """Test: a real pallet stamp elsewhere in the text is still found."""
    stamps = detector.detect("NO PALLET\nPallet stamp: 4 pallets", DocumentType.SHIP_DOCUMENT)

    assert {StampType.PALLET, StampType.NO_PALLET} <= stamp_types(stamps)


def test_one_stamp_per_type(detector):
    stamps = detector.detect("Security stamp ... SECURITY ... security", DocumentType.SHIP_DOCUMENT)

    security = [s for s in stamps if s.type == StampType.SECURITY]
    assert len(security) == 1
    assert security[0].confidence == 90.0


def test_inferred_pallet_stamp_on_ship_document(detector):
    """Test: dispatch + warehouse reference on a ship document -> inferred PALLET (70)."""
    text = "SHIPMENT DOCUMENT\nDispatched from Warehouse 3\nCarrier: FastHaul"

    stamps = detector.detect(text, DocumentType.SHIP_DOCUMENT)

    pallet = next(s for s in stamps if s.type == StampType.PALLET)
    assert pallet.matched_text == INFERRED_TEXT
    assert pallet.confidence == 70.0


def test_no_inference_on_other_document_types(detector):
    text = "Dispatched from Warehouse 3"
    assert StampType.PALLET not in stamp_types(detector.detect(text, DocumentType.INVOICE))


def test_inferred_warehouse_stamp_on_notification_letter(detector):
    """Test: notification letter naming a warehouse -> inferred WAREHOUSE stamp (75)."""
    text = "PALLET NOTIFICATION LETTER\nDeliver to: Central WH Manila"

    stamps = detector.detect(text, DocumentType.PALLET_NOTIFICATION_LETTER)

    warehouse = next(s for s in stamps if s.type == StampType.WAREHOUSE)
    assert warehouse.matched_text == INFERRED_TEXT
    assert warehouse.confidence == 75.0


def test_empty_text(detector):
    assert detector.detect("", DocumentType.SHIP_DOCUMENT) == []
