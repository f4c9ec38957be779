"""Error taxonomy shared by the services and the HTTP layer.

Services raise these; ``register_exception_handlers`` turns each one into a
JSON response carrying a stable ``reason`` so clients can tell e.g. an expired
link from a revoked one.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger("stashgate")


class StashgateError(Exception):
    status_code = 500
    reason = "error"
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def extra(self) -> dict:
        return {}


class Unauthenticated(StashgateError):
    status_code = 401
    reason = "unauthenticated"
    default_message = "Invalid or inactive API key"


class Forbidden(StashgateError):
    status_code = 403
    reason = "forbidden"
    default_message = "Access denied"


class NotFound(StashgateError):
    status_code = 404
    reason = "not_found"
    default_message = "Not found"


class InvalidInput(StashgateError):
    status_code = 400
    reason = "invalid_input"
    default_message = "Invalid input"


class InvalidPath(InvalidInput):
    reason = "invalid_path"
    default_message = "Invalid path"


class InvalidToken(InvalidInput):
    reason = "invalid_token"
    default_message = "Invalid share token format"


class Revoked(StashgateError):
    status_code = 403
    reason = "revoked"
    default_message = "Share link has been revoked"


class Expired(StashgateError):
    status_code = 410
    reason = "expired"
    default_message = "Share link has expired"


class PasswordRequired(StashgateError):
    status_code = 401
    reason = "password_required"
    default_message = "Password required"

    def extra(self) -> dict:
        return {"requires_password": True}


class InvalidPassword(StashgateError):
    status_code = 401
    reason = "invalid_password"
    default_message = "Invalid password"


class UpstreamFailure(StashgateError):
    status_code = 500
    reason = "upstream_failure"
    default_message = "Storage is temporarily unavailable"


class UpstreamTimeout(UpstreamFailure):
    status_code = 503
    reason = "upstream_timeout"
    default_message = "Storage did not respond in time, retry later"

    def extra(self) -> dict:
        return {"retryable": True}


def error_response(exc: StashgateError) -> JSONResponse:
    content = {"detail": exc.message, "reason": exc.reason}
    content.update(exc.extra())
    headers = {"WWW-Authenticate": "ApiKey"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StashgateError)
    async def handle_stashgate_error(request: Request, exc: StashgateError):
        if exc.status_code >= 500:
            logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.reason, exc.message)
        return error_response(exc)

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(request: Request, exc: SQLAlchemyError):
        logger.error(
            "%s %s -> metadata store failed: %s",
            request.method, request.url.path, exc,
            exc_info=exc,
        )
        return error_response(UpstreamFailure())

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        problems = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        content = {"detail": problems, "reason": InvalidInput.reason}
        return JSONResponse(status_code=InvalidInput.status_code, content=content)
