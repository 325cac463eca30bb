"""
Structured run logging for reconciliation.

Every stage of a run emits one snake_case event with keyword context:
transactions_file_loaded, aliases_file_loaded, records_normalized,
aggregation_done (with the record counters and grand total), and
record_malformed / argument_malformed / reconcile_failed on bad input.

Events go to stderr; stdout is reserved for the CSV or JSON report.
Imports nothing from ledger_reconcile so any module can log at import time.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)

# JSON output by default (LOG_FORMAT=json); anything else renders for a console
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Ensure timestamp is always present (ISO 8601)."""
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Rename structlog 'event' to event_type; keep message if present."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


def configure_structlog() -> None:
    """Configure structlog once at import: JSON, timestamp, level, event_type."""
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _normalize_event,
    ]
    if LOG_FORMAT == "json":
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        )
    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for a ledger_reconcile module.

        logger = get_logger(__name__)
        logger.info("transactions_file_loaded", path=str(path), records=120)

    renders as {"event_type": "transactions_file_loaded", "path": ..., "records": 120,
    "level": "info", "logger": "ledger_reconcile.ingestion.loader", "timestamp": ...}
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_run(transactions_path: str) -> structlog.BoundLogger:
    """Logger for one CLI run; every event carries the transactions file path."""
    return get_logger("ledger_reconcile").bind(transactions=transactions_path)
