"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args, service_name: str = "ledger-gateway", **kwargs):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "ledger-gateway") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_auth_event(request_id: str, event: str, outcome: str, user_id: int | None = None) -> None:
    """Log signup/login outcomes; never includes passwords or tokens"""
    logging.info(
        "Auth event",
        extra={
            "request_id": request_id,
            "step": event,
            "outcome": outcome,
            "user_id": user_id,
        },
    )


def log_report(request_id: str, user_id: int, report: str, row_count: int, duration_ms: float) -> None:
    """Log a served report for latency and usage analysis"""
    logging.info(
        "Report served",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "report_complete",
            "report": report,
            "row_count": row_count,
            "duration_ms": duration_ms,
        },
    )
