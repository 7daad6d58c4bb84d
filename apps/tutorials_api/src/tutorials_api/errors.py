"""
Translate data-layer and validation failures into JSON error responses.

Every error body carries a ``message``; nothing is retried or recovered here.
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from tutorials_core.logging import get_logger
from tutorials_db import DatabaseOperationError, DoesNotExistError

logger = get_logger(__name__)


def _describe(error: dict[str, Any]) -> str:
    field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    text = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
    return f"{field}: {text}" if field else text


async def handle_validation_error(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    message = "; ".join(_describe(e) for e in errors) or "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": message, "errors": jsonable_encoder(errors)},
    )


async def handle_does_not_exist(
    _request: Request, exc: DoesNotExistError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"message": str(exc)},
    )


async def handle_database_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Database failure on %s %s", request.method, request.url.path, exc_info=exc
    )
    message = (
        str(exc)
        if isinstance(exc, DatabaseOperationError)
        else "Database is unavailable"
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(DoesNotExistError, handle_does_not_exist)
    app.add_exception_handler(DatabaseOperationError, handle_database_error)
    app.add_exception_handler(SQLAlchemyError, handle_database_error)
    # Driver-level connection failures (asyncpg) are not wrapped by SQLAlchemy
    app.add_exception_handler(OSError, handle_database_error)
