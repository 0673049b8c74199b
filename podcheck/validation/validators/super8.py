"""
Super8 validator.

Super8 deliveries with pallets come as six documents. Ship documents are
often scanned badly enough to end up UNKNOWN, so this policy lets a single
UNKNOWN document stand in for a missing ship document when all three
pallet documents are there. Every check derived from such a document is
softened to WARNING.
"""

from podcheck.validation.validators.base import BaseDeliveryValidator


class Super8Validator(BaseDeliveryValidator):
    """Super8 policy: full checklist plus ship document inference."""

    CLIENT_ID = "SUPER8"
    ALLOW_SHIP_DOCUMENT_INFERENCE = True

    @property
    def name(self) -> str:
        return "Super8"

    @property
    def version(self) -> str:
        return "2.0.0"
