"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Iterable

from pythonjsonlogger.json import JsonFormatter

from card_invoices.config import settings


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_purchase_event(
    step: str,
    purchase_id: str,
    card_id: str,
    installments: int,
    invoice_months: Iterable[str],
) -> None:
    """Log structured purchase lifecycle outcome"""
    logging.info(
        "Purchase %s",
        step,
        extra={
            "step": f"purchase_{step}",
            "purchase_id": purchase_id,
            "card_id": card_id,
            "installments": installments,
            "invoice_months": sorted(invoice_months),
        },
    )
