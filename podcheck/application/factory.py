"""Wiring of the validation service with its collaborators."""

from pathlib import Path
from typing import Optional

from loguru import logger

from podcheck.application.document_processor import DocumentProcessor
from podcheck.application.validation_service import DeliveryValidationService
from podcheck.clients.client_config_loader import ClientConfigLoader
from podcheck.clients.repository import ClientConfigRepository
from podcheck.config.settings import DOCUMENT_WORKERS
from podcheck.validation.validators.registry import create_default_registry


def create_validation_service(
    clients_dir: Optional[Path] = None,
    max_workers: int = DOCUMENT_WORKERS,
) -> DeliveryValidationService:
    """
    Builds a DeliveryValidationService with the built-in validators.

    Args:
        clients_dir: Directory with client YAML configs (defaults to podcheck/clients/)
        max_workers: Threads for per-document processing
    """
    repository = ClientConfigRepository(loader=ClientConfigLoader(clients_dir))
    registry = create_default_registry()
    logger.debug(
        f"[Factory] Validation service: clients={repository.list_clients()}, "
        f"validators={registry.list_registered_clients()}"
    )
    return DeliveryValidationService(
        config_provider=repository,
        registry=registry,
        processor=DocumentProcessor(),
        max_workers=max_workers,
    )
