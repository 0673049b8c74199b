"""Document type classification."""

from .document_classifier import DocumentClassifier, TypeScore, adaptive_threshold
from .keywords import DOCUMENT_KEYWORDS, KeywordSet

__all__ = ["DOCUMENT_KEYWORDS", "DocumentClassifier", "KeywordSet", "TypeScore", "adaptive_threshold"]
