"""
Application layer: per-document processing and the delivery validation service.
"""

from .document_processor import DocumentProcessor, ProcessedDocument
from .factory import create_validation_service
from .validation_service import BatchValidationResult, DeliveryValidationService

__all__ = [
    "BatchValidationResult",
    "DeliveryValidationService",
    "DocumentProcessor",
    "ProcessedDocument",
    "create_validation_service",
]
