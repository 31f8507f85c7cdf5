# app/core/error_handlers.py

from collections import defaultdict
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .exceptions import StoreError

logger = logging.getLogger(__name__)


def validation_errors_by_field(errors) -> dict:
    """Reshape pydantic error entries into a field -> messages map."""
    by_field = defaultdict(list)
    for error in errors:
        loc = [str(part) for part in error["loc"]]
        if loc and loc[0] in ("body", "query", "path"):
            loc = loc[1:]
        by_field[".".join(loc) or "body"].append(error["msg"])
    return dict(by_field)


def setup_error_handlers(app: FastAPI):
    """Set up global error handlers for the FastAPI application."""

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = validation_errors_by_field(exc.errors())
        logger.warning(f"Validation error on {request.method} {request.url.path}: {errors}")
        return JSONResponse(
            status_code=422,
            content={"message": "The given data was invalid.", "errors": errors},
        )
