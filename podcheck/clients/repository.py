"""
Client config repository: loading, TTL caching and invalidation.

The engine only sees IClientConfigProvider.get_config(). Updates go through
save()/deactivate(), which drop the cached entry before returning.
"""

from pathlib import Path
from typing import List, Optional

from loguru import logger

from podcheck.clients.cache import TTLCache
from podcheck.clients.client_config_loader import ClientConfigLoader
from podcheck.config.settings import (
    CLIENT_CONFIG_CACHE_TTL_SECONDS,
    DEFAULT_CLIENT_ID,
    PROTECTED_CLIENT_IDS,
)
from podcheck.contracts.client_config_dto import ClientValidationConfig
from podcheck.domain.exceptions import ClientConfigError, ClientConfigNotFoundError
from podcheck.domain.interfaces import IClientConfigProvider


def _normalize(client_id: Optional[str]) -> str:
    normalized = (client_id or "").strip().upper()
    return normalized or DEFAULT_CLIENT_ID


class ClientConfigRepository(IClientConfigProvider):
    """Cached access to client configs stored as YAML."""

    def __init__(
        self,
        loader: Optional[ClientConfigLoader] = None,
        cache: Optional[TTLCache] = None,
    ):
        self.loader = loader or ClientConfigLoader()
        self.cache = cache if cache is not None else TTLCache(CLIENT_CONFIG_CACHE_TTL_SECONDS)

    @classmethod
    def from_directory(cls, clients_dir: Path) -> "ClientConfigRepository":
        return cls(loader=ClientConfigLoader(clients_dir))

    def get_config(self, client_id: Optional[str]) -> ClientValidationConfig:
        """
        Active config of a client; unknown or inactive clients get the default config.

        Raises:
            ClientConfigNotFoundError: Not even a default config exists
        """
        key = _normalize(client_id)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        config = self._load_active(key)
        self.cache.set(key, config)
        return config

    def _load_active(self, client_id: str) -> ClientValidationConfig:
        try:
            config = self.loader.load(client_id)
        except ClientConfigNotFoundError:
            if client_id == DEFAULT_CLIENT_ID:
                raise
            logger.warning(f"[ClientConfigRepository] No config for {client_id} -> using {DEFAULT_CLIENT_ID}")
            return self.loader.load(DEFAULT_CLIENT_ID)

        if not config.is_active and client_id != DEFAULT_CLIENT_ID:
            logger.warning(f"[ClientConfigRepository] Config for {client_id} is inactive -> using {DEFAULT_CLIENT_ID}")
            return self.loader.load(DEFAULT_CLIENT_ID)
        return config

    def save(self, config: ClientValidationConfig) -> ClientValidationConfig:
        """Persists a config and invalidates its cache entry."""
        if not config.is_active and config.client_id in PROTECTED_CLIENT_IDS:
            raise ClientConfigError(
                f"Config for {config.client_id} cannot be deactivated",
                component="ClientConfigRepository",
            )
        self.loader.save(config)
        # Unknown clients are cached with the default config under their own key
        self.invalidate(None if config.client_id == DEFAULT_CLIENT_ID else config.client_id)
        return config

    def deactivate(self, client_id: str) -> ClientValidationConfig:
        """Marks a client config inactive. Protected clients cannot be deactivated."""
        key = _normalize(client_id)
        if key in PROTECTED_CLIENT_IDS:
            raise ClientConfigError(
                f"Config for {key} cannot be deactivated",
                component="ClientConfigRepository",
            )
        config = self.loader.load(key).model_copy(update={"is_active": False})
        self.loader.save(config)
        self.invalidate(key)
        logger.info(f"[ClientConfigRepository] Deactivated {key}")
        return config

    def invalidate(self, client_id: Optional[str] = None) -> None:
        """Drops one cached config, or all of them when client_id is None."""
        if client_id is None:
            self.cache.clear()
            logger.debug("[ClientConfigRepository] Cache cleared")
            return
        self.cache.invalidate(_normalize(client_id))
        logger.debug(f"[ClientConfigRepository] Cache invalidated for {_normalize(client_id)}")

    def list_clients(self) -> List[str]:
        return self.loader.list_available()
