"""Map cart engine errors onto HTTP responses"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cart_core import (
    CapacityError,
    CartError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: list[tuple[type[CartError], int]] = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (CapacityError, 409),
    (PersistenceError, 503),
]


def status_for(exc: CartError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 400


async def cart_error_handler(request: Request, exc: CartError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": exc.code},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CartError, cart_error_handler)
