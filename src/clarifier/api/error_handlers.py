# clarifier/api/error_handlers.py
"""
FastAPI exception handlers that map persistence-level exceptions to HTTP responses.

How to use:
    - Call register_exception_handlers(app) from your app factory.
    - Code that commits through the clarifier raises SaveChangesError; the handler
      produces a stable JSON payload (via .to_payload()) and status (via .http_status()).
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging
from clarifier.exceptions.base import PersistenceError, SaveChangesError

logger = logging.getLogger(__name__)


async def save_changes_error_handler(request: Request, exc: SaveChangesError) -> JSONResponse:
    """
    422 for validation failures, 409 for update failures.
    Payload: {"detail": "Error code ...", "error_code": "...", "kind": "validation" | "update"}
    """
    # The failure itself was already logged (basic + clarified) when it was caught.
    logger.info(
        "SaveChangesError for %s %s",
        request.method,
        request.url.path,
        extra={"error_code": exc.error_code, "clarified": exc.clarified},
    )
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    """
    Fallback for other persistence errors -> 400 by default (or kind-defined status).
    """
    logger.warning("PersistenceError for %s %s: %s", request.method, request.url.path, str(exc))
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


# Most specific first.
def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SaveChangesError, save_changes_error_handler)
    app.add_exception_handler(PersistenceError, persistence_error_handler)


__all__ = ["save_changes_error_handler", "persistence_error_handler", "register_exception_handlers"]
