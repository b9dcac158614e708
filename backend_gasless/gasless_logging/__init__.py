"""
Structured logging for the gasless relay (structlog, JSON by default).
"""

from backend_gasless.gasless_logging.logger import (
    build_processors,
    configure_structlog,
    error_text,
    get_logger,
    short_address,
)

__all__ = ["build_processors", "configure_structlog", "error_text", "get_logger", "short_address"]
