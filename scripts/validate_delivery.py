#!/usr/bin/env python3
"""
Validates a delivery bundle from a JSON file and prints the result.

Bundle format:
    {
      "id": "DLV-001",
      "reference": "SO-12345",
      "client_id": "SUPER8",
      "documents": [
        {"id": "doc-1", "raw_text": "...", "ocr_confidence": 92.5},
        ...
      ]
    }

Usage:
    python scripts/validate_delivery.py bundle.json
    python scripts/validate_delivery.py bundle.json --client super8 --log-level DEBUG
"""

import argparse
import json
import sys
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from podcheck.application.factory import create_validation_service
from podcheck.contracts.delivery_dto import Delivery
from podcheck.contracts.document_dto import Document
from podcheck.domain.exceptions import PodcheckError
from podcheck.logging_config import setup_logging


def load_delivery(path: Path, client_override: str = None) -> Delivery:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    documents = [Document(**doc) for doc in data.get("documents", [])]
    return Delivery.from_documents(
        delivery_id=data.get("id", path.stem),
        documents=documents,
        reference=data.get("reference", ""),
        client_id=client_override or data.get("client_id"),
    )


def main() -> int:
    parser = argparse.ArgumentParser(description="Podcheck delivery validation")
    parser.add_argument("bundle", help="Path to the delivery bundle JSON")
    parser.add_argument("--client", help="Client id (overrides the bundle)")
    parser.add_argument("--clients-dir", help="Directory with client YAML configs")
    parser.add_argument("--log-level", default="INFO", help="Log level (default: INFO)")
    args = parser.parse_args()

    setup_logging(args.log_level)

    bundle_path = Path(args.bundle)
    if not bundle_path.exists():
        logger.error(f"[CLI] Bundle not found: {bundle_path}")
        return 1

    try:
        delivery = load_delivery(bundle_path, args.client)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.error(f"[CLI] Invalid bundle {bundle_path}: {e}")
        return 1

    service = create_validation_service(
        clients_dir=Path(args.clients_dir) if args.clients_dir else None
    )
    try:
        result = service.validate_delivery(delivery)
    except PodcheckError as e:
        logger.error(f"[CLI] {e}")
        print(json.dumps({"delivery_id": delivery.id, "overall_status": "FAIL", "summary": delivery.summary}))
        return 2

    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return 0 if result.overall_status.value == "PASS" else 3


if __name__ == "__main__":
    sys.exit(main())
