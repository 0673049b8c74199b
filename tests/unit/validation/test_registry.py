import pytest

from podcheck.domain.exceptions import ValidatorRegistryError
from podcheck.validation.validators import (
    DefaultValidator,
    Super8Validator,
    ValidatorRegistry,
    create_default_registry,
)


@pytest.fixture
def registry():
    return create_default_registry()


class TestLookup:
    """get_validator never fails while a default exists."""

    @pytest.mark.parametrize("client_id", ["SUPER8", "super8", "  Super8 "])
    def test_registered_client_normalized(self, registry, client_id):
        assert isinstance(registry.get_validator(client_id), Super8Validator)

    @pytest.mark.parametrize("client_id", [None, "", "   ", "ACME"])
    def test_missing_or_unknown_client_gets_default(self, registry, client_id):
        assert isinstance(registry.get_validator(client_id), DefaultValidator)

    def test_no_default_raises(self):
        with pytest.raises(ValidatorRegistryError):
            ValidatorRegistry().get_validator("ACME")


class TestRegistration:

    def test_register_and_unregister(self, registry):
        registry.register("acme", DefaultValidator())

        assert registry.has_validator("ACME")
        assert registry.list_registered_clients() == ["ACME", "SUPER8"]
        assert registry.unregister("Acme") is True
        assert registry.unregister("Acme") is False
        assert not registry.has_validator("ACME")

    def test_empty_client_id_rejected(self, registry):
        with pytest.raises(ValidatorRegistryError):
            registry.register("  ", DefaultValidator())

    def test_clear_removes_default(self, registry):
        registry.clear()

        assert registry.list_registered_clients() == []
        with pytest.raises(ValidatorRegistryError):
            registry.get_validator(None)

    def test_registry_info(self, registry):
        info = registry.get_registry_info()

        assert info["total_validators"] == 1
        assert info["default_validator"] == "Default"
        assert info["validators"] == [{"client_id": "SUPER8", "name": "Super8", "version": "2.0.0"}]


def test_super8_enables_ship_document_inference():
    assert Super8Validator.ALLOW_SHIP_DOCUMENT_INFERENCE is True
    assert DefaultValidator.ALLOW_SHIP_DOCUMENT_INFERENCE is False
