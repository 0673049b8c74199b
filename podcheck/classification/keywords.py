"""
Keyword sets for document classification.

Primary keywords identify a document type on their own; secondary keywords
only add supporting evidence. Primary weights are much larger so one strong
signal beats several weak ones.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from podcheck.contracts.enums import DocumentType


@dataclass(frozen=True)
class KeywordSet:
    primary: List[str]
    secondary: List[str] = field(default_factory=list)
    primary_weight: float = 10.0
    secondary_weight: float = 2.0


DOCUMENT_KEYWORDS: Dict[DocumentType, KeywordSet] = {
    DocumentType.PALLET_NOTIFICATION_LETTER: KeywordSet(
        primary=[
            "pallet notification",
            "notification letter",
            "pallet notification letter",
        ],
        secondary=[
            "warehouse stamp",
            "warehouse signature",
            "pallet",
            "notification",
        ],
        primary_weight=10,
        secondary_weight=2,
    ),
    DocumentType.LOSCAM_DOCUMENT: KeywordSet(
        primary=[
            "loscam",
            "loscam document",
            "loscam philippines",
            "customer transaction",
        ],
        secondary=[
            "pallet exchange",
            "pallet rental",
            "customer signature",
            "exchange",
            "docket no",
            "transaction date",
            "qty sent",
        ],
        primary_weight=10,
        secondary_weight=2,
    ),
    DocumentType.CUSTOMER_PALLET_RECEIVING: KeywordSet(
        primary=[
            "customer pallet receiving",
            "pallet receiving",
            "receiving document",
            "plate number",
            "platc number",
            "received qty",
            "received quantity",
        ],
        secondary=[
            "received",
            "pallet receipt",
            "customer receipt",
            "returned qty",
            "returned quantity",
            "trucker",
            "loscam",
            "rppc",
            "invoice number",
        ],
        primary_weight=10,
        secondary_weight=2,
    ),
    DocumentType.SHIP_DOCUMENT: KeywordSet(
        primary=[
            "ship document",
            "shipping document",
            "dispatch",
            "shipment document",
            "shipment",
        ],
        secondary=[
            "dispatch stamp",
            "time-out",
            "time out",
            "security",
            "carrier",
            "warehouse address",
            "gate",
            "driver",
            "customer name",
            "delivered",
            "dispatch date",
            "shipper",
            "consignee",
            "date and time",
            "release",
            "guard on duty",
            "unilever philippines",
            "stamp",
            "approved",
            "signature",
            "address",
            "remarks",
        ],
        primary_weight=10,
        secondary_weight=5,
    ),
    DocumentType.INVOICE: KeywordSet(
        primary=[
            "invoice",
            "invoice no",
            "invoice number",
            "inv no",
        ],
        secondary=[
            "po number",
            "purchase order",
            "bill to",
            "invoice date",
            "total amount",
        ],
        primary_weight=10,
        secondary_weight=2,
    ),
    DocumentType.RAR: KeywordSet(
        primary=[
            "receiving acknowledgement receipt",
            "receiving acknowledgment receipt",
            "cfast receiving acknowledgement",
            "rar",
            "r.a.r",
            "r.a.r.",
            "r & a r",
            "r&ar",
            "receiving and acknowledgment",
            "receiving & acknowledgment",
            "receiving and acknowledgement",
            "receiving acknowledgment",
            "receiving acknowledgement",
            "acknowledgment receipt",
            "acknowledgement receipt",
            "r & a receipt",
            "receiving report",
            "goods received note",
            "delivery receipt",
        ],
        secondary=[
            "received",
            "acknowledged",
            "total cases",
            "receiving report",
            "goods received",
            "qty received",
            "quantity received",
            "receiver signature",
            "received by",
            "delivery confirmation",
            "confirmed delivery",
            "acceptance",
            "accepted by",
        ],
        primary_weight=10,
        secondary_weight=3,
    ),
}
