"""
Podcheck engine settings.

Module-level constants shared by the classifier, detectors, comparator and
validation service. Client-specific toggles live in the YAML client configs
(podcheck/clients/<client_id>/config.yaml), not here.
"""

import os
from pathlib import Path

# =============================================================================
# PROJECT PATHS
# =============================================================================
PACKAGE_ROOT = Path(__file__).parent.parent
CLIENTS_DIR = Path(os.getenv("PODCHECK_CLIENTS_DIR", str(PACKAGE_ROOT / "clients")))

# =============================================================================
# CONFIDENCE
# =============================================================================
CONFIDENCE_MIN = 0.0
CONFIDENCE_MAX = 100.0

# =============================================================================
# DOCUMENT CLASSIFICATION
# =============================================================================
# Fixed score used to normalize the winning score into 0..100
CLASSIFICATION_MAX_SCORE = 60.0

# Fuzzy match earns this share of the keyword weight
FUZZY_MATCH_FACTOR = 0.7
FUZZY_SIMILARITY_THRESHOLD = 70.0
MIN_FUZZY_KEYWORD_LENGTH = 5

# Minimum confidence to accept a classification, by OCR quality
CLASSIFICATION_THRESHOLD = 25.0
CLASSIFICATION_THRESHOLD_MEDIUM_OCR = 20.0   # OCR confidence 60..75
CLASSIFICATION_THRESHOLD_LOW_OCR = 15.0      # OCR confidence < 60
MEDIUM_OCR_CONFIDENCE = 75.0
LOW_OCR_CONFIDENCE = 60.0

# RAR wins over INVOICE when its score reaches this share of the invoice score
RAR_TIE_BREAK_RATIO = 0.5

MAX_ALTERNATIVE_TYPES = 3

# =============================================================================
# STAMP & SIGNATURE DETECTION
# =============================================================================
STAMP_MATCH_CONFIDENCE = 90.0
INFERRED_PALLET_STAMP_CONFIDENCE = 70.0
INFERRED_WAREHOUSE_STAMP_CONFIDENCE = 75.0
TEXT_SIGNATURE_CONFIDENCE = 85.0

# Text is more reliable for the signature type, image proves ink exists
TEXT_SIGNATURE_WEIGHT = 0.6
IMAGE_SIGNATURE_WEIGHT = 0.4

# =============================================================================
# FIELD EXTRACTION & COMPARISON
# =============================================================================
CASE_COUNT_MIN = 1
CASE_COUNT_MAX = 500

# Item sum above this is treated as implausible
ITEM_SUM_CEILING = 500
MIN_ITEMS_FOR_ITEM_SUM = 2

ITEM_TABLE_SCAN_LIMIT = 20
ITEM_DESCRIPTION_MIN_LENGTH = 2
ITEM_DESCRIPTION_MAX_LENGTH = 100
YEAR_LIKE_QUANTITY_RANGE = (2020, 2030)

VARIANCE_EPSILON = 1e-9

# Discrepancy samples shown in the checklist message
DISCREPANCY_SAMPLE_LIMIT = 5

# =============================================================================
# STATUS ROLLUP
# =============================================================================
# A single FAILED item whose name contains one of these forces FAIL
CRITICAL_CHECK_NAMES = [
    "Total number of cases",
    "cases on Invoice matches",
    "cases on RAR",
    "Discrepancy details",
    "quantity differences",
]

CRITICAL_FAILURE_THRESHOLD = 2

# =============================================================================
# CLIENTS
# =============================================================================
DEFAULT_CLIENT_ID = "DEFAULT"
PROTECTED_CLIENT_IDS = ["SUPER8"]
CLIENT_CONFIG_CACHE_TTL_SECONDS = 300.0

# =============================================================================
# PROCESSING
# =============================================================================
DOCUMENT_WORKERS = int(os.getenv("PODCHECK_DOCUMENT_WORKERS", "4"))
