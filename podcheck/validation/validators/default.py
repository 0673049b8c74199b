"""
Default validator.

Used for every client without its own policy. Applies the client config
as-is, with no document-type inference.
"""

from podcheck.validation.validators.base import BaseDeliveryValidator


class DefaultValidator(BaseDeliveryValidator):
    """Generic config-driven validation."""

    ALLOW_SHIP_DOCUMENT_INFERENCE = False

    @property
    def name(self) -> str:
        return "Default"
