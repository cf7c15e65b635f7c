"""FastAPI exception handlers rendering domain failures as error bodies."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from nestya_auth.domain.auth.errors import AuthError, AuthErrorKind
from nestya_auth.infrastructure.http.error_mapping import (
    ErrorDescriptor,
    build_error_response,
    describe_error_kind,
    error_descriptor_for_exception,
)

logger = logging.getLogger(__name__)


def install_error_handlers(app: FastAPI) -> None:
    """Register handlers for domain, validation and unexpected failures."""

    async def handle_auth_error(request: Request, exc: Exception) -> JSONResponse:
        descriptor = error_descriptor_for_exception(exc)
        logger.info(
            "http_auth_error path=%s kind=%s status=%s",
            request.url.path,
            descriptor.kind.value,
            descriptor.status_code,
        )
        return _render(descriptor)

    async def handle_validation_error(request: Request, exc: Exception) -> JSONResponse:
        logger.info("http_invalid_request path=%s", request.url.path)
        return _render(describe_error_kind(AuthErrorKind.INVALID_REQUEST))

    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("http_unexpected_failure path=%s", request.url.path)
        return _render(describe_error_kind(AuthErrorKind.UNEXPECTED_FAILURE))

    app.add_exception_handler(AuthError, handle_auth_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


def _render(descriptor: ErrorDescriptor) -> JSONResponse:
    body = build_error_response(descriptor)
    return JSONResponse(
        status_code=descriptor.status_code,
        content=body.model_dump(mode="json"),
    )
