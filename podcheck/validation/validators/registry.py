"""
Validator Registry - routes a delivery to its client policy.

Client ids are normalized (strip, upper case). An empty or unknown id gets
the default validator, so any delivery can be validated, even for a client
nobody configured.
"""

from typing import Dict, List, Optional

from loguru import logger

from podcheck.domain.exceptions import ValidatorRegistryError
from podcheck.validation.validators.base import AbstractDeliveryValidator
from podcheck.validation.validators.default import DefaultValidator
from podcheck.validation.validators.super8 import Super8Validator


def normalize_client_id(client_id: Optional[str]) -> Optional[str]:
    if client_id is None:
        return None
    normalized = client_id.strip().upper()
    return normalized or None


class ValidatorRegistry:
    """
    Mapping client id -> validator, plus one default.

    Example:
        registry = create_default_registry()
        validator = registry.get_validator("super8")
        result = validator.validate(delivery, config)
    """

    def __init__(self, default: Optional[AbstractDeliveryValidator] = None):
        self._validators: Dict[str, AbstractDeliveryValidator] = {}
        self._default = default

    def register(self, client_id: str, validator: AbstractDeliveryValidator) -> None:
        """
        Registers a validator for a client, replacing any previous one.

        Args:
            client_id: Client identifier (case-insensitive)
            validator: Policy implementation
        """
        normalized = normalize_client_id(client_id)
        if normalized is None:
            raise ValidatorRegistryError("client_id cannot be empty", component="ValidatorRegistry")
        if normalized in self._validators:
            logger.warning(f"[ValidatorRegistry] Replacing validator for {normalized}")
        self._validators[normalized] = validator
        logger.info(f"[ValidatorRegistry] Registered {validator.name} v{validator.version} for {normalized}")

    def set_default(self, validator: AbstractDeliveryValidator) -> None:
        self._default = validator
        logger.info(f"[ValidatorRegistry] Default validator: {validator.name}")

    def get_validator(self, client_id: Optional[str] = None) -> AbstractDeliveryValidator:
        """
        Args:
            client_id: Client identifier, may be None

        Returns:
            The client's validator, or the default one

        Raises:
            ValidatorRegistryError: Neither a client validator nor a default exists
        """
        normalized = normalize_client_id(client_id)
        if normalized is not None and normalized in self._validators:
            validator = self._validators[normalized]
            logger.debug(f"[ValidatorRegistry] {normalized} -> {validator.name}")
            return validator

        if self._default is None:
            raise ValidatorRegistryError(
                f"No validator for client '{client_id}' and no default configured",
                component="ValidatorRegistry",
            )

        if normalized is None:
            logger.debug(f"[ValidatorRegistry] No client id -> {self._default.name}")
        else:
            logger.warning(
                f"[ValidatorRegistry] Unknown client '{client_id}' ({normalized}) "
                f"-> falling back to {self._default.name}"
            )
        return self._default

    def has_validator(self, client_id: Optional[str]) -> bool:
        normalized = normalize_client_id(client_id)
        return normalized is not None and normalized in self._validators

    def list_registered_clients(self) -> List[str]:
        return sorted(self._validators)

    def unregister(self, client_id: str) -> bool:
        """Returns True if a validator was removed."""
        normalized = normalize_client_id(client_id)
        removed = self._validators.pop(normalized, None) if normalized else None
        if removed is not None:
            logger.info(f"[ValidatorRegistry] Unregistered {normalized}")
        return removed is not None

    def clear(self) -> None:
        """Removes all client validators and the default."""
        self._validators.clear()
        self._default = None
        logger.info("[ValidatorRegistry] Cleared")

    def get_registry_info(self) -> dict:
        return {
            "total_validators": len(self._validators),
            "default_validator": self._default.name if self._default else None,
            "validators": [
                {"client_id": client_id, "name": validator.name, "version": validator.version}
                for client_id, validator in sorted(self._validators.items())
            ],
        }


def create_default_registry() -> ValidatorRegistry:
    """Registry with all built-in client policies; built once at process start."""
    registry = ValidatorRegistry(default=DefaultValidator())
    registry.register(Super8Validator.CLIENT_ID, Super8Validator())
    return registry
