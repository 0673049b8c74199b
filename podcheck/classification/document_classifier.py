"""
Document Classifier: detects the document type from noisy OCR text.

Scoring per type:
- primary keyword, exact match   -> primary_weight
- primary keyword, fuzzy match   -> primary_weight * 0.7
- same for secondary keywords with secondary_weight

The winning score is normalized to 0..100 against a fixed maximum score.
A combined invoice+RAR document is classified as RAR when the RAR score
reaches half of the invoice score. Poor OCR lowers the acceptance threshold.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from loguru import logger
from rapidfuzz import fuzz, process

from podcheck.classification.keywords import DOCUMENT_KEYWORDS, KeywordSet
from podcheck.config.settings import (
    CLASSIFICATION_MAX_SCORE,
    CLASSIFICATION_THRESHOLD,
    CLASSIFICATION_THRESHOLD_LOW_OCR,
    CLASSIFICATION_THRESHOLD_MEDIUM_OCR,
    FUZZY_MATCH_FACTOR,
    FUZZY_SIMILARITY_THRESHOLD,
    LOW_OCR_CONFIDENCE,
    MAX_ALTERNATIVE_TYPES,
    MEDIUM_OCR_CONFIDENCE,
    MIN_FUZZY_KEYWORD_LENGTH,
    RAR_TIE_BREAK_RATIO,
)
from podcheck.contracts.document_dto import AlternativeType, Document, DocumentClassification
from podcheck.contracts.enums import DocumentType
from podcheck.domain.numbers import sanitize_confidence

TOKEN_PATTERN = re.compile(r"\w+")


@dataclass
class TypeScore:
    """Keyword score of one candidate type."""
    type: DocumentType
    score: float = 0.0
    matched_keywords: List[str] = field(default_factory=list)

    @property
    def confidence(self) -> float:
        return round(min(100.0, self.score / CLASSIFICATION_MAX_SCORE * 100.0), 2)


class _TextIndex:
    """Lower-cased text plus token windows for fuzzy matching."""

    def __init__(self, text: str):
        self.lower = text.lower()
        self.tokens = TOKEN_PATTERN.findall(self.lower)
        self._windows: Dict[int, List[str]] = {}

    def windows(self, size: int) -> List[str]:
        if size not in self._windows:
            self._windows[size] = [
                " ".join(self.tokens[i:i + size])
                for i in range(max(0, len(self.tokens) - size + 1))
            ]
        return self._windows[size]


def adaptive_threshold(ocr_confidence: float) -> float:
    """Minimum classification confidence for the given OCR quality."""
    if ocr_confidence < LOW_OCR_CONFIDENCE:
        return CLASSIFICATION_THRESHOLD_LOW_OCR
    if ocr_confidence < MEDIUM_OCR_CONFIDENCE:
        return CLASSIFICATION_THRESHOLD_MEDIUM_OCR
    return CLASSIFICATION_THRESHOLD


class DocumentClassifier:
    """
    Keyword-based document classifier.

    Stateless: the same text and OCR confidence always give the same result.

    Example:
        classifier = DocumentClassifier()
        result = classifier.classify(raw_text, ocr_confidence=82.0)
        result.detected_type  # DocumentType.INVOICE
    """

    def __init__(self, keyword_sets: Optional[Dict[DocumentType, KeywordSet]] = None):
        self.keyword_sets = keyword_sets or DOCUMENT_KEYWORDS

    def classify_document(self, document: Document) -> DocumentClassification:
        """
        Classifies a document unless an operator pinned its type.

        Args:
            document: Document with raw text and OCR confidence

        Returns:
            DocumentClassification (the stored one for overridden documents)
        """
        if document.manual_override is not None:
            override = document.manual_override
            stored = document.classification
            if (
                stored is not None
                and stored.manually_overridden
                and stored.detected_type == override.type
                and stored.override_reason == override.reason
            ):
                logger.debug(f"[DocumentClassifier] {document.id}: manual override kept ({stored.detected_type.value})")
                return stored
            logger.info(
                f"[DocumentClassifier] {document.id}: manual override to "
                f"{override.type.value} ({override.reason})"
            )
            return DocumentClassification(
                detected_type=override.type,
                confidence=100.0,
                manually_overridden=True,
                override_reason=override.reason,
            )
        return self.classify(document.raw_text, document.ocr_confidence)

    def classify(self, text: Optional[str], ocr_confidence: float = 100.0) -> DocumentClassification:
        """
        Args:
            text: Raw OCR text
            ocr_confidence: OCR confidence 0..100

        Returns:
            DocumentClassification with up to 3 alternatives
        """
        ocr_confidence = sanitize_confidence(ocr_confidence)
        threshold = adaptive_threshold(ocr_confidence)

        if not text or not text.strip():
            logger.debug("[DocumentClassifier] Empty text -> UNKNOWN")
            return DocumentClassification(detected_type=DocumentType.UNKNOWN, confidence=0.0, threshold=threshold)

        index = _TextIndex(text)
        scores = [self.score_type(doc_type, keywords, index) for doc_type, keywords in self.keyword_sets.items()]
        scores.sort(key=lambda s: s.score, reverse=True)

        winner = self._apply_rar_tie_break(scores)
        alternatives = [
            AlternativeType(type=s.type, confidence=s.confidence)
            for s in scores
            if s.type != winner.type and s.score > 0
        ][:MAX_ALTERNATIVE_TYPES]

        if winner.score <= 0 or winner.confidence < threshold:
            logger.debug(
                f"[DocumentClassifier] Best {winner.type.value} {winner.confidence:.1f}% "
                f"below threshold {threshold}% (OCR {ocr_confidence:.0f}%) -> UNKNOWN"
            )
            return DocumentClassification(
                detected_type=DocumentType.UNKNOWN,
                confidence=winner.confidence,
                matched_keywords=winner.matched_keywords,
                alternative_types=[
                    AlternativeType(type=s.type, confidence=s.confidence) for s in scores if s.score > 0
                ][:MAX_ALTERNATIVE_TYPES],
                threshold=threshold,
            )

        logger.debug(
            f"[DocumentClassifier] {winner.type.value} ({winner.confidence:.1f}%, "
            f"keywords={winner.matched_keywords})"
        )
        return DocumentClassification(
            detected_type=winner.type,
            confidence=winner.confidence,
            matched_keywords=winner.matched_keywords,
            alternative_types=alternatives,
            threshold=threshold,
        )

    def score_type(self, doc_type: DocumentType, keywords: KeywordSet, index: "_TextIndex") -> TypeScore:
        result = TypeScore(type=doc_type)
        for group, weight in (
            (keywords.primary, keywords.primary_weight),
            (keywords.secondary, keywords.secondary_weight),
        ):
            for keyword in group:
                kind = self._match_keyword(keyword, index)
                if kind == "exact":
                    result.score += weight
                    result.matched_keywords.append(keyword)
                elif kind == "fuzzy":
                    result.score += weight * FUZZY_MATCH_FACTOR
                    result.matched_keywords.append(keyword)
        return result

    @staticmethod
    def _match_keyword(keyword: str, index: "_TextIndex") -> Optional[str]:
        keyword = keyword.lower()
        if re.search(r"(?<!\w)" + re.escape(keyword) + r"(?!\w)", index.lower):
            return "exact"

        keyword_tokens = TOKEN_PATTERN.findall(keyword)
        # Short keywords and acronyms fuzzy-match too much noise
        if len("".join(keyword_tokens)) < MIN_FUZZY_KEYWORD_LENGTH:
            return None
        windows = index.windows(len(keyword_tokens))
        if not windows:
            return None
        match = process.extractOne(
            " ".join(keyword_tokens),
            windows,
            scorer=fuzz.ratio,
            score_cutoff=FUZZY_SIMILARITY_THRESHOLD,
        )
        return "fuzzy" if match is not None else None

    @staticmethod
    def _apply_rar_tie_break(scores: List[TypeScore]) -> TypeScore:
        by_type = {s.type: s for s in scores}
        invoice = by_type.get(DocumentType.INVOICE)
        rar = by_type.get(DocumentType.RAR)
        if invoice and rar and invoice.score > 0 and rar.score > 0 and rar.score >= invoice.score * RAR_TIE_BREAK_RATIO:
            logger.debug(
                f"[DocumentClassifier] RAR tie-break: RAR {rar.score} >= "
                f"{RAR_TIE_BREAK_RATIO:.0%} of INVOICE {invoice.score}"
            )
            return rar
        return scores[0]
