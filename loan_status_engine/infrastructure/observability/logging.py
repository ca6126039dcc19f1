"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from loan_status_engine.config import settings


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


def log_portfolio_run(
    request_id: str,
    loan_count: int,
    status_counts: Dict[str, int],
    orphan_rows: int,
    duration_ms: float,
) -> None:
    """Log structured ETL outcome for analysis"""
    logging.info(
        "Portfolio processed",
        extra={
            "request_id": request_id,
            "step": "etl_complete",
            "loan_count": loan_count,
            "status_counts": status_counts,
            "orphan_rows": orphan_rows,
            "duration_ms": duration_ms,
        },
    )
