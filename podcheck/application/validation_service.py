"""
Delivery validation service.

Flow per delivery:
1. fan-out: every document is classified and detected in a worker thread
2. fan-in: wait for all documents, then write results back
3. the client's validator builds the checklist

Runs for the same delivery id are serialized with a per-delivery lock.
Any exception marks the delivery FAILED (overall FAIL, "Validation failed:
...") and is re-raised to the caller.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Sequence

from loguru import logger

from podcheck.application.document_processor import DocumentProcessor, ProcessedDocument
from podcheck.clients.repository import ClientConfigRepository
from podcheck.config.settings import DOCUMENT_WORKERS
from podcheck.contracts.delivery_dto import Delivery, ProcessingInfo
from podcheck.contracts.document_dto import Document
from podcheck.contracts.enums import DeliveryStatus, OverallStatus
from podcheck.domain.exceptions import DocumentProcessingError
from podcheck.domain.interfaces import IClientConfigProvider
from podcheck.validation.validators.base import DeliveryValidationResult
from podcheck.validation.validators.registry import ValidatorRegistry, create_default_registry


@dataclass
class _DeliveryLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


@dataclass
class BatchValidationResult:
    """Results of validate_batch(); failed deliveries do not stop the batch."""
    results: Dict[str, DeliveryValidationResult] = field(default_factory=dict)
    failures: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "validated": len(self.results),
            "failed": len(self.failures),
            "results": {delivery_id: r.to_dict() for delivery_id, r in self.results.items()},
            "failures": dict(self.failures),
        }


class DeliveryValidationService:
    """
    Validates deliveries end to end.

    Example:
        service = DeliveryValidationService()
        result = service.validate_delivery(delivery)
        result.overall_status  # OverallStatus.PASS
    """

    def __init__(
        self,
        config_provider: Optional[IClientConfigProvider] = None,
        registry: Optional[ValidatorRegistry] = None,
        processor: Optional[DocumentProcessor] = None,
        max_workers: int = DOCUMENT_WORKERS,
    ):
        self.config_provider = config_provider or ClientConfigRepository()
        self.registry = registry or create_default_registry()
        self.processor = processor or DocumentProcessor()
        self.max_workers = max(1, max_workers)
        self._locks: Dict[str, _DeliveryLock] = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def _delivery_lock(self, delivery_id: str) -> Iterator[None]:
        """Serializes runs of one delivery; the lock is dropped once no run holds or waits for it."""
        with self._locks_guard:
            entry = self._locks.get(delivery_id)
            if entry is None:
                entry = _DeliveryLock()
                self._locks[delivery_id] = entry
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._locks_guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[delivery_id]

    def validate_delivery(self, delivery: Delivery) -> DeliveryValidationResult:
        """
        Args:
            delivery: Delivery with its documents' OCR output

        Returns:
            DeliveryValidationResult; the delivery is updated in place

        Raises:
            Exception: Whatever failed, after the delivery was marked FAILED
        """
        with self._delivery_lock(delivery.id):
            return self._run(delivery)

    def revalidate_delivery(self, delivery: Delivery) -> DeliveryValidationResult:
        """Re-derives everything from scratch. Manual overrides are kept."""
        with self._delivery_lock(delivery.id):
            logger.info(f"[DeliveryValidation] Revalidating delivery {delivery.id}")
            for document in delivery.document_list:
                document.reset_derived()
            delivery.sync_document_refs()
            delivery.checklist = None
            delivery.completeness = None
            delivery.issues = []
            delivery.overall_status = None
            delivery.summary = None
            return self._run(delivery)

    def validate_batch(self, deliveries: Sequence[Delivery]) -> BatchValidationResult:
        batch = BatchValidationResult()
        for delivery in deliveries:
            try:
                batch.results[delivery.id] = self.validate_delivery(delivery)
            except Exception as e:
                logger.error(f"[DeliveryValidation] Batch: delivery {delivery.id} failed: {e}")
                batch.failures[delivery.id] = str(e)
        logger.info(f"[DeliveryValidation] Batch done: {len(batch.results)} validated, {len(batch.failures)} failed")
        return batch

    def process_documents(self, documents: Sequence[Document]) -> List[ProcessedDocument]:
        """
        Processes documents in parallel and waits for all of them.

        Raises:
            DocumentProcessingError: At least one document failed
        """
        if not documents:
            return []

        workers = min(self.max_workers, len(documents))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="podcheck-doc") as executor:
            futures = [executor.submit(self.processor.process, document) for document in documents]

        processed = []
        errors = []
        for document, future in zip(documents, futures):
            error = future.exception()
            if error is not None:
                logger.error(f"[DeliveryValidation] Document {document.id} failed: {error}")
                errors.append((document, error))
            else:
                processed.append(future.result())

        if errors:
            document, error = errors[0]
            raise DocumentProcessingError(
                f"{len(errors)} of {len(documents)} documents failed",
                document_id=document.id,
                failed_count=len(errors),
                component="DocumentProcessor",
                original_error=error,
            ) from error
        return processed

    def _run(self, delivery: Delivery) -> DeliveryValidationResult:
        start = time.perf_counter()
        delivery.status = DeliveryStatus.PROCESSING
        delivery.processing = ProcessingInfo(started_at=datetime.now())
        documents = delivery.document_list
        logger.info(f"[DeliveryValidation] Delivery {delivery.id}: {len(documents)} documents, client={delivery.client_id}")

        try:
            config = self.config_provider.get_config(delivery.client_id)
            validator = self.registry.get_validator(delivery.client_id)

            try:
                processed = self.process_documents(documents)
            except DocumentProcessingError as e:
                delivery.processing.documents_failed = e.failed_count
                raise

            for document, result in zip(documents, processed):
                result.apply_to(document)
            delivery.sync_document_refs()
            delivery.processing.documents_processed = len(processed)

            result = validator.validate(delivery, config)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.error(f"[DeliveryValidation] Delivery {delivery.id} failed: {e}")
            delivery.status = DeliveryStatus.FAILED
            delivery.overall_status = OverallStatus.FAIL
            delivery.summary = f"Validation failed: {e}"
            delivery.checklist = None
            delivery.processing.completed_at = datetime.now()
            delivery.processing.processing_time_ms = round(elapsed_ms, 2)
            delivery.processing.error = str(e)
            raise

        elapsed_ms = (time.perf_counter() - start) * 1000
        delivery.checklist = result.checklist
        delivery.completeness = result.completeness
        delivery.issues = list(result.issues)
        delivery.overall_status = result.overall_status
        delivery.summary = result.summary
        delivery.status = DeliveryStatus.COMPLETED
        delivery.processing.completed_at = datetime.now()
        delivery.processing.processing_time_ms = round(elapsed_ms, 2)
        delivery.processing.validator_name = result.validator_name
        delivery.processing.validator_version = result.validator_version

        logger.info(
            f"[DeliveryValidation] Delivery {delivery.id}: {result.overall_status.value} "
            f"({result.summary}) in {elapsed_ms:.1f}ms"
        )
        return result
