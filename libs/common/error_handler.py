"""Domain exceptions and the FastAPI handlers that render them.

Service-layer code raises these instead of ``HTTPException`` so the same
operations can be driven from routers, scripts and tests.

Usage:
    from libs.common.error_handler import add_exception_handlers

    app = FastAPI()
    add_exception_handlers(app)
"""

from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from libs.common.logging import get_logger

logger = get_logger(__name__)


class StoreError(Exception):
    """Base exception for errors surfaced to API callers."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class NotFoundError(StoreError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str):
        super().__init__(f"{entity} not found")
        self.entity = entity


class EmptyCartError(StoreError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Your cart is empty."):
        super().__init__(message)


class StorageError(StoreError):
    """A persistence failure that aborted a transaction."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Order could not be placed. Please try again."):
        super().__init__(message)


class ValidationError(StoreError):
    """Field-level input errors, shaped like FastAPI request validation errors."""

    # Literal: the starlette constant was renamed (UNPROCESSABLE_ENTITY -> _CONTENT)
    status_code = 422

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))

    def to_detail(self) -> list[dict[str, Any]]:
        return [
            {"loc": ["body", field], "msg": msg, "type": "value_error"}
            for field, msg in self.errors.items()
        ]


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    if isinstance(exc, ValidationError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_detail()})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def add_exception_handlers(app: FastAPI) -> None:
    """Register handlers for domain errors and unexpected exceptions."""
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
