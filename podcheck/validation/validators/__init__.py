"""Client validation policies and the registry that selects them."""

from .base import AbstractDeliveryValidator, BaseDeliveryValidator, DeliveryValidationResult
from .default import DefaultValidator
from .registry import ValidatorRegistry, create_default_registry, normalize_client_id
from .super8 import Super8Validator

__all__ = [
    "AbstractDeliveryValidator",
    "BaseDeliveryValidator",
    "DefaultValidator",
    "DeliveryValidationResult",
    "Super8Validator",
    "ValidatorRegistry",
    "create_default_registry",
    "normalize_client_id",
]
