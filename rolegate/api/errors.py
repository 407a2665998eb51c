"""Exception handlers that turn request failures into plain-text responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse, RedirectResponse, Response
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from rolegate.api.deps import LOGIN_PATH, Unauthenticated

logger = logging.getLogger(__name__)


async def unauthenticated_handler(request: Request, exc: Unauthenticated) -> Response:
    return RedirectResponse(LOGIN_PATH, status_code=status.HTTP_302_FOUND)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
    fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
    return PlainTextResponse(
        f"Missing or invalid fields: {', '.join(fields)}",
        status_code=status.HTTP_400_BAD_REQUEST,
    )


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> Response:
    # Store failures that escape a route (e.g. inside a guard).
    logger.error(
        "Unhandled store error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return PlainTextResponse(
        f"Server error: {exc}",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(Unauthenticated, unauthenticated_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
