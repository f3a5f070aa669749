"""
Structured Logging

One JSON object per line on stdout. Each line carries the correlation id of
the request that produced it. Donation and buffer fields passed through
``extra`` are grouped under a single ``donation`` key, so a log query can
select ingests, evictions and cursor resyncs without parsing messages.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

ROOT_LOGGER_NAME = "donation_relay"

# extra keys that describe a donation or the buffer state around it
DONATION_FIELDS = (
    "donation_id",
    "donator_name",
    "amount_raw",
    "after_id",
    "returned",
    "latest_id",
    "buffer_size",
    "evicted",
    "resync",
)

correlation_id_var: ContextVar[Optional[str]] = ContextVar(
    "correlation_id", default=None
)


class RelayJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter with correlation id, source location and donation group"""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["source"] = f"{record.module}.{record.funcName}:{record.lineno}"
        log_record["correlation_id"] = correlation_id_var.get() or "N/A"

        donation = {
            key: log_record.pop(key) for key in DONATION_FIELDS if key in log_record
        }
        if donation:
            log_record["donation"] = donation


def setup_logging(
    log_level: str = "INFO", service: str = ROOT_LOGGER_NAME
) -> logging.Logger:
    """
    Send the service's logs to stdout as JSON.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        service: Value of the ``service`` field on every line

    Returns:
        The configured root logger of the service
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(log_level)
    logger.propagate = False

    # Re-running setup must not stack handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(
        RelayJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
            static_fields={"service": service},
            # donor names and messages are often not ASCII
            json_ensure_ascii=False,
        )
    )
    logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Child of the service logger; module names keep their package prefix"""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """Bind a correlation id to the current request, generating one if absent"""
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    correlation_id_var.set(correlation_id)
    return correlation_id
