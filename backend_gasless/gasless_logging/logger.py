"""
Structured logging for the gasless relay.

Every line is one JSON object with timestamp, level, event_type and logger
name. Lines emitted while a request is handled also carry request_id, bound
by the API middleware through structlog contextvars.

Fields whose name looks like key material are replaced before rendering, so
an accidental logger.info(..., private_key=...) never reaches the output.

Depends only on stdlib logging and structlog so config/ and relay/ can import
it without cycles.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)

# json for deployments; anything else renders for a terminal
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

REDACTED = "[redacted]"
_SECRET_FIELD_MARKERS = ("private_key", "secret", "seed", "keypair")


def _redact_secrets(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    for key in list(event_dict):
        lowered = key.lower()
        if any(marker in lowered for marker in _SECRET_FIELD_MARKERS):
            event_dict[key] = REDACTED
    return event_dict


def build_processors(log_format: str | None = None) -> list[Any]:
    """Processor chain ending in the JSON or console renderer."""
    fmt = (log_format or LOG_FORMAT).strip().lower()
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        _redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.EventRenamer("event_type"),
    ]
    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty(), event_key="event_type"))
    return processors


def configure_structlog(log_format: str | None = None, level: int | None = None) -> None:
    structlog.configure(
        processors=build_processors(log_format),
        wrapper_class=structlog.make_filtering_bound_logger(level or LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger bound to the module name.

        logger = get_logger(__name__)
        logger.info("gasless_transaction_assembled", transaction_type="spl", instruction_count=2)
    """
    return structlog.get_logger(name).bind(logger=name)


def short_address(address: object, keep: int = 8) -> str:
    """Shorten a base58 address for log fields: first `keep` chars plus '...'."""
    text = str(address or "")
    if len(text) <= keep:
        return text
    return text[:keep] + "..."


def error_text(exc: BaseException) -> str:
    """
    Loggable description of an exception. solana-py RPC exceptions carry an
    empty str(); their text lives in error_msg.
    """
    text = getattr(exc, "error_msg", None) or str(exc)
    if not text and exc.__cause__ is not None:
        text = repr(exc.__cause__)
    return text or type(exc).__name__
