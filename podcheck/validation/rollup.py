"""
Status rollup: turns check items into one overall status and a summary.

1. Count FAILED, WARNING, PASSED.
2. A FAILED item whose name contains a critical check name is critical.
3. PASS when nothing failed and nothing warned.
4. REVIEW when nothing failed but something warned.
5. FAIL when any critical item failed or at least two items failed,
   otherwise REVIEW.
"""

from typing import Iterable, List, Sequence

from podcheck.config.settings import CRITICAL_CHECK_NAMES, CRITICAL_FAILURE_THRESHOLD
from podcheck.contracts.enums import CheckStatus, OverallStatus


def is_critical_check(name: str, critical_names: Sequence[str] = CRITICAL_CHECK_NAMES) -> bool:
    return any(critical in name for critical in critical_names)


def count_statuses(items: Iterable) -> dict:
    counts = {status: 0 for status in CheckStatus}
    for item in items:
        counts[item.status] += 1
    return counts


def compute_overall_status(items: List) -> OverallStatus:
    """
    Args:
        items: Check items of all sections (anything with name and status)

    Returns:
        OverallStatus derived from the items alone
    """
    counts = count_statuses(items)
    failed = counts[CheckStatus.FAILED]
    warnings = counts[CheckStatus.WARNING]

    if failed == 0:
        return OverallStatus.PASS if warnings == 0 else OverallStatus.REVIEW

    has_critical_failure = any(
        item.status == CheckStatus.FAILED and is_critical_check(item.name)
        for item in items
    )
    if has_critical_failure or failed >= CRITICAL_FAILURE_THRESHOLD:
        return OverallStatus.FAIL
    return OverallStatus.REVIEW


def build_summary(items: List) -> str:
    """Formats "{passed}/{total} checks passed[, N failed][, M warnings]"."""
    counts = count_statuses(items)
    summary = f"{counts[CheckStatus.PASSED]}/{len(items)} checks passed"
    if counts[CheckStatus.FAILED] > 0:
        summary += f", {counts[CheckStatus.FAILED]} failed"
    if counts[CheckStatus.WARNING] > 0:
        summary += f", {counts[CheckStatus.WARNING]} warnings"
    return summary
