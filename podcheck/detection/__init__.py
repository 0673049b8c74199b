"""Stamp and signature detection."""

from .detector import StampSignatureDetector
from .signature_detector import SIGNATURE_LAYOUTS, SignatureDetector, SignatureLayout, fuse_confidence
from .stamp_detector import STAMP_PATTERNS, StampDetector

__all__ = [
    "SIGNATURE_LAYOUTS",
    "STAMP_PATTERNS",
    "SignatureDetector",
    "SignatureLayout",
    "StampDetector",
    "StampSignatureDetector",
    "fuse_confidence",
]
