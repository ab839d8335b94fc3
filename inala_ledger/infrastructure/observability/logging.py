"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from inala_ledger.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
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


def log_ledger_built(
    request_id: str,
    period_key: Optional[str],
    total_clients: int,
    clients_with_debt: int,
    total_outstanding_cents: int,
    orphan_payments: int,
    duration_ms: float,
) -> None:
    """Log structured ledger build outcome"""
    logging.info(
        "Credit summary built",
        extra={
            "request_id": request_id,
            "step": "ledger_built",
            "period": period_key or "all",
            "total_clients": total_clients,
            "clients_with_debt": clients_with_debt,
            "total_outstanding_cents": total_outstanding_cents,
            "orphan_payments": orphan_payments,
            "duration_ms": duration_ms,
        },
    )


def log_payment_recorded(
    request_id: str,
    customer_name: str,
    amount_cents: int,
    period_key: str,
    remaining_cents: int,
) -> None:
    """Log structured payment capture"""
    logging.info(
        "Payment recorded",
        extra={
            "request_id": request_id,
            "step": "payment_recorded",
            "customer_name": customer_name,
            "amount_cents": amount_cents,
            "period": period_key,
            "remaining_cents": remaining_cents,
        },
    )
