"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List

from pythonjsonlogger import jsonlogger

from valuation_gateway.config import settings


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


def log_valuation(
    request_id: str,
    business_id: str,
    total: str,
    warnings: List[str],
    duration_ms: float,
) -> None:
    """Log structured valuation outcome for analysis"""
    logging.info(
        "Valuation completed",
        extra={
            "request_id": request_id,
            "business_id": business_id,
            "step": "valuation_complete",
            "outcome": "partial" if warnings else "complete",
            "missing_components": warnings,
            "total": total,
            "duration_ms": duration_ms,
        },
    )


def log_schedule(request_id: str, asset_id: str, method: str, periods: int) -> None:
    """Log a generated depreciation schedule"""
    logging.info(
        "Depreciation schedule generated",
        extra={
            "request_id": request_id,
            "asset_id": asset_id,
            "step": "schedule_generated",
            "method": method,
            "periods": periods,
        },
    )
