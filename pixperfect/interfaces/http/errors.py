"""Exception handlers rendering every failure as ``{"error", "message"}``."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pixperfect.modules.assets import AssetError

logger = logging.getLogger(__name__)

_STATUS_REASONS = {
    status.HTTP_400_BAD_REQUEST: "invalid_parameter",
    status.HTTP_401_UNAUTHORIZED: "unauthenticated",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
}


def _payload(reason: str, message: str) -> dict[str, str]:
    return {"error": reason, "message": message}


async def asset_error_handler(request: Request, exc: AssetError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed with %s: %r",
            request.method,
            request.url.path,
            exc.reason,
            exc.__cause__ or exc,
        )
    return JSONResponse(status_code=exc.status_code, content=_payload(exc.reason, exc.message))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    reason = _STATUS_REASONS.get(exc.status_code, "error")
    return JSONResponse(
        status_code=exc.status_code,
        content=_payload(reason, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_payload("invalid_parameter", "Request validation failed"),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_payload("internal_error", "Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AssetError, asset_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


__all__ = ["register_exception_handlers"]
