"""
Unit tests for pallet scenario detection and document completeness.
"""

import pytest

from podcheck.contracts import (
    ClientValidationConfig,
    DocumentType,
    IssueSeverity,
    PalletScenario,
    StampInfo,
    StampType,
)
from podcheck.validation.pallet_scenario import check_completeness, detect_pallet_scenario


@pytest.fixture
def super8_like_config():
    return ClientValidationConfig(client_id="SUPER8")


def stamp(stamp_type):
    return StampInfo(type=stamp_type, confidence=90)


class TestScenarioPriority:
    """First matching rule wins; document types outrank stamps."""

    def test_notification_letter_outranks_no_pallet_stamp(self, make_document):
        documents = [
            make_document("pnl", DocumentType.PALLET_NOTIFICATION_LETTER),
            make_document("ship", DocumentType.SHIP_DOCUMENT, stamps=[stamp(StampType.NO_PALLET)]),
        ]
        assert detect_pallet_scenario(documents) == PalletScenario.WITH_PALLETS

    def test_pallet_stamp_outranks_no_pallet_stamp(self, make_document):
        documents = [
            make_document("ship", DocumentType.SHIP_DOCUMENT, stamps=[stamp(StampType.PALLET)]),
            make_document("inv", DocumentType.INVOICE, stamps=[stamp(StampType.NO_PALLET)]),
        ]
        assert detect_pallet_scenario(documents) == PalletScenario.WITH_PALLETS

    @pytest.mark.parametrize("doc_type", [
        DocumentType.LOSCAM_DOCUMENT,
        DocumentType.CUSTOMER_PALLET_RECEIVING,
    ])
    def test_any_pallet_document(self, make_document, doc_type):
        assert detect_pallet_scenario([make_document("d", doc_type)]) == PalletScenario.WITH_PALLETS

    def test_no_pallet_stamp(self, make_document):
        documents = [make_document("ship", DocumentType.SHIP_DOCUMENT, stamps=[stamp(StampType.NO_PALLET)])]
        assert detect_pallet_scenario(documents) == PalletScenario.WITHOUT_PALLETS

    def test_default_is_without_pallets(self, make_document):
        assert detect_pallet_scenario([make_document("inv", DocumentType.INVOICE)]) == PalletScenario.WITHOUT_PALLETS
        assert detect_pallet_scenario([]) == PalletScenario.WITHOUT_PALLETS

    def test_client_can_force_scenario(self, make_document):
        config = ClientValidationConfig(
            client_id="X", document_completeness={"pallet_scenario": "WITH_PALLETS"},
        )

        result = check_completeness([make_document("inv", DocumentType.INVOICE)], config)

        assert result.scenario == PalletScenario.WITH_PALLETS


class TestCompleteness:

    def test_missing_documents_are_high_issues(self, make_document, super8_like_config):
        documents = [
            make_document("ship", DocumentType.SHIP_DOCUMENT),
            make_document("inv", DocumentType.INVOICE),
        ]

        result = check_completeness(documents, super8_like_config)

        assert result.scenario == PalletScenario.WITHOUT_PALLETS
        assert result.missing == [DocumentType.RAR]
        assert not result.is_complete
        missing_issues = [i for i in result.issues if i.type == "MISSING_REQUIRED_DOCUMENT"]
        assert len(missing_issues) == 1
        assert missing_issues[0].severity == IssueSeverity.HIGH

    def test_extra_documents(self, make_document):
        config = ClientValidationConfig(
            client_id="X", document_completeness={"require_rar": False},
        )
        documents = [
            make_document("ship", DocumentType.SHIP_DOCUMENT),
            make_document("inv", DocumentType.INVOICE),
            make_document("rar", DocumentType.RAR),
        ]

        result = check_completeness(documents, config)

        assert result.is_complete
        assert result.extra == [DocumentType.RAR]


class TestShipDocumentInference:
    """Lone UNKNOWN document standing in for the missing ship document."""

    @pytest.fixture
    def pallet_delivery(self, make_document):
        return [
            make_document("pnl", DocumentType.PALLET_NOTIFICATION_LETTER),
            make_document("loscam", DocumentType.LOSCAM_DOCUMENT),
            make_document("cpr", DocumentType.CUSTOMER_PALLET_RECEIVING),
            make_document("inv", DocumentType.INVOICE),
            make_document("rar", DocumentType.RAR),
            make_document("blurry", DocumentType.UNKNOWN, ocr_confidence=42),
        ]

    def test_inferred_when_allowed(self, pallet_delivery, super8_like_config):
        result = check_completeness(pallet_delivery, super8_like_config, allow_ship_document_inference=True)

        assert result.inferred_ship_document_id == "blurry"
        assert result.is_complete
        assert DocumentType.SHIP_DOCUMENT in result.present
        assert any(i.type == "SHIP_DOCUMENT_INFERRED" for i in result.issues)

    def test_not_inferred_by_default(self, pallet_delivery, super8_like_config):
        result = check_completeness(pallet_delivery, super8_like_config)

        assert result.inferred_ship_document_id is None
        assert result.missing == [DocumentType.SHIP_DOCUMENT]

    def test_not_inferred_with_two_unknown_documents(self, pallet_delivery, make_document, super8_like_config):
        documents = pallet_delivery + [make_document("other", DocumentType.UNKNOWN)]

        result = check_completeness(documents, super8_like_config, allow_ship_document_inference=True)

        assert result.inferred_ship_document_id is None

    def test_not_inferred_when_pallet_document_missing(self, pallet_delivery, super8_like_config):
        documents = [d for d in pallet_delivery if d.id != "cpr"]

        result = check_completeness(documents, super8_like_config, allow_ship_document_inference=True)

        assert result.inferred_ship_document_id is None
