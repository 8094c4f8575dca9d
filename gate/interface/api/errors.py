"""Exception handlers mapping errors to JSON responses.

Every failure leaves the API as ``{"error": message}`` with the status of
its error category.
"""

import logging

import logfire
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from gate.domain.error import DomainError, ErrorCategory

logger = logging.getLogger(__name__)

# Details stay in logfire; clients only ever see this
INTERNAL_ERROR_MESSAGE = "Internal server error"

STATUS_BY_CATEGORY: dict[ErrorCategory, int] = {
    ErrorCategory.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorCategory.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCategory.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCategory.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = STATUS_BY_CATEGORY[exc.category]
    if status_code >= 500:
        logger.error(f"{request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.url.path} rejected ({status_code}): {exc.message}")
    return error_response(exc.message, status_code)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Missing or mistyped fields and non-JSON bodies."""
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        details.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    message = "Invalid request body"
    if details:
        message = f"{message}: {'; '.join(details)}"
    return error_response(message, status.HTTP_400_BAD_REQUEST)


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Database failures; the statement and its parameters are never echoed."""
    logfire.exception("Credential store error", path=request.url.path)
    return error_response(INTERNAL_ERROR_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logfire.exception("Unhandled error", path=request.url.path)
    return error_response(INTERNAL_ERROR_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR)


class UnhandledErrorMiddleware:
    """Answer uncaught exceptions with the generic 500 body.

    Starlette sends exceptions without a specific handler to its outermost
    middleware, past CORS. Installed inside CORSMiddleware, this keeps the
    CORS headers on those responses too.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            if response_started:
                raise
            logfire.exception("Unhandled error", path=scope.get("path"))
            response = error_response(
                INTERNAL_ERROR_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR
            )
            await response(scope, receive, send)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    # Fallback for errors raised outside the middleware stack
    app.add_exception_handler(Exception, unhandled_error_handler)
