"""Error taxonomy shared by every router, and the handlers that render it.

Every error leaves the API as ``{"error": str, "details"?: any}``.
"""
import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 500

    def __init__(self, error: str, details: Any = None):
        super().__init__(error)
        self.error = error
        self.details = details


class ValidationError(AppError):
    status_code = 400


class NotFound(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class StoreError(AppError):
    status_code = 500


def error_body(error: str, details: Any = None) -> dict:
    body: dict[str, Any] = {"error": error}
    if details is not None:
        body["details"] = jsonable_encoder(details)
    return body


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.error)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.error, exc.details))


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content=error_body("Validation failed", exc.errors()))


async def _integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("%s %s violated a constraint: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=409, content=error_body("Conflicting record", str(exc.orig)))


async def _data_error_handler(request: Request, exc: DataError) -> JSONResponse:
    logger.warning("%s %s rejected by the store: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=400, content=error_body("Invalid value", str(exc.orig)))


async def _store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("%s %s store failure", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=error_body("Store error", str(exc)))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(IntegrityError, _integrity_error_handler)
    app.add_exception_handler(DataError, _data_error_handler)
    app.add_exception_handler(SQLAlchemyError, _store_error_handler)
