"""
FastAPI server for the gasless relay.

The lifespan loads settings and the fee payer once and stores the shared
GaslessTransferService on app.state. Every error leaves the API as
{"success": false, "message": ...} with an explicit status code.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from backend_gasless import __version__
from backend_gasless.api_server.gasless import router as gasless_router
from backend_gasless.api_server.middleware import request_context_middleware
from backend_gasless.config import get_settings
from backend_gasless.config.env import mask_rpc_url
from backend_gasless.core.exceptions import GaslessError
from backend_gasless.gasless_logging import get_logger
from backend_gasless.relay.service import build_gasless_service

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the shared service (fee payer loaded once, read-only afterwards)."""
    settings = get_settings()
    app.state.gasless_service = build_gasless_service(settings)
    logger.info(
        "api_started",
        network=settings.solana_network,
        rpc_url=mask_rpc_url(settings.solana_rpc_url),
        rpc_timeout_sec=settings.rpc_timeout_sec,
        verify_token_decimals=settings.verify_token_decimals,
        fee_payer_configured=settings.has_fee_payer,
    )
    yield
    logger.info("api_stopped")


# -----------------------------------------------------------------------------
# App and routes
# -----------------------------------------------------------------------------

app = FastAPI(
    title="Backend Gasless API",
    description="Builds fee-sponsored, partially signed Solana transfers (SOL and SPL).",
    version=__version__,
    lifespan=lifespan,
)

app.middleware("http")(request_context_middleware)
app.include_router(gasless_router, prefix="/api")


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness probe: API is up."""
    return {"status": "ok"}


# -----------------------------------------------------------------------------
# Error handlers
# -----------------------------------------------------------------------------


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


@app.exception_handler(GaslessError)
def gasless_error_handler(request: Request, exc: GaslessError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "gasless_request_failed",
            path=request.url.path,
            error_type=type(exc).__name__,
            message=exc.message,
            cause=repr(exc.__cause__) if exc.__cause__ else None,
        )
    else:
        logger.info("gasless_request_rejected", path=request.url.path, message=exc.message)
    return _error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON or wrongly typed fields -> 400 in the same error shape."""
    errors: list[Any] = exc.errors()
    detail = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body')}: {err.get('msg', '')}".lstrip(": ")
        for err in errors
    )
    logger.info("gasless_request_rejected", path=request.url.path, message=detail)
    return _error_response(400, f"Invalid request body: {detail}" if detail else "Invalid request body")


@app.exception_handler(Exception)
def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("api_unhandled_error", path=request.url.path, error=str(exc))
    return _error_response(500, "Internal server error")
