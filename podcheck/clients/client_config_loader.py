"""
Loader for client validation configs from YAML files.

Directory layout:
clients/
  ├── default/
  │   └── config.yaml
  ├── super8/
  │   └── config.yaml

Pydantic validates the structure; the directory name is the client id.
"""

from pathlib import Path
from typing import List, Optional

import yaml
from loguru import logger
from pydantic import ValidationError

from podcheck.config.settings import CLIENTS_DIR
from podcheck.contracts.client_config_dto import ClientValidationConfig
from podcheck.domain.exceptions import ClientConfigError, ClientConfigNotFoundError

RULE_SECTIONS = (
    "document_completeness",
    "pallet_validation",
    "ship_document_validation",
    "invoice_validation",
    "cross_document_validation",
    "extraction_patterns",
)


class ClientConfigLoader:
    """Loads and writes client configs as YAML, validated with Pydantic."""

    def __init__(self, clients_dir: Optional[Path] = None):
        """
        Args:
            clients_dir: Directory with client configs (defaults to podcheck/clients/)
        """
        self.clients_dir = Path(clients_dir) if clients_dir is not None else CLIENTS_DIR

    def config_path(self, client_id: str) -> Path:
        return self.clients_dir / client_id.strip().lower() / "config.yaml"

    def load(self, client_id: str) -> ClientValidationConfig:
        """
        Args:
            client_id: Client identifier (case-insensitive)

        Returns:
            Validated ClientValidationConfig

        Raises:
            ClientConfigNotFoundError: No config file for this client
            ClientConfigError: File is not valid YAML or fails validation
        """
        config_path = self.config_path(client_id)
        if not config_path.exists():
            raise ClientConfigNotFoundError(
                f"Config for client '{client_id}' not found: {config_path}. "
                f"Available clients: {self.list_available()}",
                component="ClientConfigLoader",
            )

        logger.debug(f"[ClientConfigLoader] Loading config for {client_id}")
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ClientConfigError(
                f"Config for client '{client_id}' is not valid YAML: {config_path}",
                component="ClientConfigLoader",
                original_error=e,
            ) from e

        try:
            return self._parse_and_validate(data, client_id)
        except ValidationError as e:
            logger.error(f"[ClientConfigLoader] Invalid config for {client_id}:\n{e}")
            raise ClientConfigError(
                f"Config for client '{client_id}' is invalid, fix {config_path}",
                component="ClientConfigLoader",
                original_error=e,
            ) from e

    def _parse_and_validate(self, data: dict, client_id: str) -> ClientValidationConfig:
        if not isinstance(data, dict):
            raise ClientConfigError(
                f"Config for client '{client_id}' must be a mapping",
                component="ClientConfigLoader",
            )

        client_data = data.get("client") or {}
        config_dict = {
            # Directory name wins over the id written in the file
            "client_id": client_id,
            "client_name": client_data.get("name", client_id),
            "description": client_data.get("description", ""),
            "is_active": client_data.get("is_active", True),
        }
        for section in RULE_SECTIONS:
            if data.get(section) is not None:
                config_dict[section] = data[section]

        return ClientValidationConfig(**config_dict)

    def save(self, config: ClientValidationConfig) -> Path:
        """Writes a config back to <clients_dir>/<client_id>/config.yaml."""
        config_path = self.config_path(config.client_id)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        dumped = config.model_dump(mode="json")
        data = {
            "client": {
                "id": config.client_id,
                "name": config.client_name,
                "description": config.description,
                "is_active": config.is_active,
            }
        }
        for section in RULE_SECTIONS:
            data[section] = dumped[section]

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
        logger.info(f"[ClientConfigLoader] Saved config for {config.client_id}: {config_path}")
        return config_path

    def list_available(self) -> List[str]:
        """Upper-case ids of clients that have a config.yaml."""
        if not self.clients_dir.exists():
            return []
        clients = []
        for item in self.clients_dir.iterdir():
            if item.name.startswith("_") or not item.is_dir():
                continue
            if (item / "config.yaml").exists():
                clients.append(item.name.upper())
        return sorted(clients)
