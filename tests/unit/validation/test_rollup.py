import pytest

from podcheck.contracts import CheckStatus, DeliveryValidationChecklist, OverallStatus, ValidationCheckItem
from podcheck.validation.rollup import build_summary, compute_overall_status, is_critical_check

CRITICAL = "Total number of cases on Invoice matches total number of cases on RAR"


def item(status, name="Dispatch stamp is present"):
    return ValidationCheckItem(name=name, status=status)


class TestOverallStatus:
    """Status rollup of check items."""

    def test_all_passed(self):
        assert compute_overall_status([item(CheckStatus.PASSED)] * 3) == OverallStatus.PASS

    def test_not_applicable_does_not_count(self):
        items = [item(CheckStatus.PASSED), item(CheckStatus.NOT_APPLICABLE)]
        assert compute_overall_status(items) == OverallStatus.PASS

    def test_warnings_only_is_review(self):
        items = [item(CheckStatus.PASSED), item(CheckStatus.WARNING)]
        assert compute_overall_status(items) == OverallStatus.REVIEW

    def test_one_minor_failure_is_review(self):
        """Test: one non-critical FAILED and no warnings -> REVIEW."""
        items = [item(CheckStatus.PASSED), item(CheckStatus.FAILED, "Time-out is indicated")]
        assert compute_overall_status(items) == OverallStatus.REVIEW

    def test_one_critical_failure_is_fail(self):
        items = [item(CheckStatus.PASSED)] * 5 + [item(CheckStatus.FAILED, CRITICAL)]
        assert compute_overall_status(items) == OverallStatus.FAIL

    def test_two_minor_failures_is_fail(self):
        items = [item(CheckStatus.FAILED, "Dispatch stamp is present"), item(CheckStatus.FAILED, "B1. Ship Document is present")]
        assert compute_overall_status(items) == OverallStatus.FAIL

    def test_empty_checklist_passes(self):
        assert compute_overall_status([]) == OverallStatus.PASS


@pytest.mark.parametrize("name,critical", [
    (CRITICAL, True),
    ("Discrepancy details identified (items and quantity differences noted)", True),
    ("Invoice PO number matches RAR PO number", False),
    ("Security signature is present", False),
])
def test_critical_names(name, critical):
    assert is_critical_check(name) is critical


def test_summary_format():
    items = [
        item(CheckStatus.PASSED),
        item(CheckStatus.FAILED),
        item(CheckStatus.WARNING),
        item(CheckStatus.WARNING),
        item(CheckStatus.NOT_APPLICABLE),
    ]
    assert build_summary(items) == "1/5 checks passed, 1 failed, 2 warnings"


def test_summary_all_passed():
    assert build_summary([item(CheckStatus.PASSED)] * 4) == "4/4 checks passed"


def test_checklist_derives_status_from_sections():
    """Test: overall status and summary are computed, serialized with the sections."""
    checklist = DeliveryValidationChecklist(
        pallet_checks=[item(CheckStatus.PASSED)],
        invoice_checks=[item(CheckStatus.FAILED, CRITICAL)],
    )

    assert checklist.overall_status == OverallStatus.FAIL
    assert checklist.summary == "1/2 checks passed, 1 failed"
    dumped = checklist.model_dump(mode="json")
    assert dumped["overall_status"] == "FAIL"
    assert dumped["summary"] == "1/2 checks passed, 1 failed"
