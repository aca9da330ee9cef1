"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args, service_name: str = "future-letter", **kwargs):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "future-letter") -> None:
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


def log_letter(
    request_id: str,
    goal: str,
    severity: int,
    polish_result: str,
    fallback: bool,
    llm_ms: float,
    duration_ms: float,
) -> None:
    """Log structured letter outcome, including LLM timing"""
    logging.info(
        "Letter completed",
        extra={
            "request_id": request_id,
            "step": "letter_complete",
            "goal": goal,
            "severity": severity,
            "polish_result": polish_result,
            "fallback": fallback,
            "llm_ms": round(llm_ms, 1),
            "duration_ms": round(duration_ms, 1),
        },
    )


def log_llm_error(request_id: Optional[str], error) -> None:
    """Log LLM diagnostics; the user still receives the template letter"""
    logging.error(
        "LLM polish failed",
        extra={
            "request_id": request_id,
            "step": "llm_polish",
            "error_kind": error.kind.value,
            "upstream_status": error.status,
            "upstream_request_id": error.request_id,
            "upstream_code": error.upstream_code,
            "upstream_type": error.upstream_type,
            "error_name": error.name,
            "detail_head": error.detail,
            "model": error.model,
            "hint": error.hint,
        },
    )
