"""
Enumerations shared by all podcheck contracts.

All enums are `str` based so DTOs serialize to their plain values.
"""

from enum import Enum


class DocumentType(str, Enum):
    """Kinds of documents found in a delivery bundle."""
    PALLET_NOTIFICATION_LETTER = "PALLET_NOTIFICATION_LETTER"
    LOSCAM_DOCUMENT = "LOSCAM_DOCUMENT"
    CUSTOMER_PALLET_RECEIVING = "CUSTOMER_PALLET_RECEIVING"
    SHIP_DOCUMENT = "SHIP_DOCUMENT"
    INVOICE = "INVOICE"
    RAR = "RAR"
    UNKNOWN = "UNKNOWN"


# Documents that only exist when the delivery carries pallets
PALLET_DOCUMENT_TYPES = (
    DocumentType.PALLET_NOTIFICATION_LETTER,
    DocumentType.LOSCAM_DOCUMENT,
    DocumentType.CUSTOMER_PALLET_RECEIVING,
)


class StampType(str, Enum):
    DISPATCH = "DISPATCH"
    PALLET = "PALLET"
    NO_PALLET = "NO_PALLET"
    WAREHOUSE = "WAREHOUSE"
    LOSCAM = "LOSCAM"
    SECURITY = "SECURITY"
    OTHER = "OTHER"


class SignatureType(str, Enum):
    DRIVER = "DRIVER"
    RECEIVER = "RECEIVER"
    CUSTOMER = "CUSTOMER"
    SECURITY = "SECURITY"
    WAREHOUSE_STAFF = "WAREHOUSE_STAFF"
    CARRIER = "CARRIER"
    STORE_MANAGER = "STORE_MANAGER"


class SignaturePosition(str, Enum):
    """Side of the page a signature is expected on. Advisory only."""
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    UNKNOWN = "UNKNOWN"


class CheckStatus(str, Enum):
    PASSED = "PASSED"
    FAILED = "FAILED"
    WARNING = "WARNING"
    NOT_APPLICABLE = "NOT_APPLICABLE"


class OverallStatus(str, Enum):
    PASS = "PASS"
    REVIEW = "REVIEW"
    FAIL = "FAIL"


class DeliveryStatus(str, Enum):
    """Lifecycle of a delivery inside the validation service."""
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class PalletScenario(str, Enum):
    WITH_PALLETS = "WITH_PALLETS"
    WITHOUT_PALLETS = "WITHOUT_PALLETS"


class PalletScenarioMode(str, Enum):
    """Client setting: force a scenario or detect it from the documents."""
    WITH_PALLETS = "WITH_PALLETS"
    WITHOUT_PALLETS = "WITHOUT_PALLETS"
    AUTO_DETECT = "AUTO_DETECT"


class IssueSeverity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class CaseTotalSource(str, Enum):
    """Where a document's total case count came from."""
    ITEM_SUM = "item_sum"
    SUMMARY = "summary"
