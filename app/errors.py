from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


logger = logging.getLogger(__name__)


class PortfolioError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict:
        return {"message": self.message}


class ValidationError(PortfolioError):
    """Missing or invalid request field, out-of-range index."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(PortfolioError):
    status_code = status.HTTP_404_NOT_FOUND


class AuthError(PortfolioError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str, *, forbidden: bool = False) -> None:
        super().__init__(message)
        if forbidden:
            self.status_code = status.HTTP_403_FORBIDDEN


class UpstreamError(PortfolioError):
    """Document store or media host failure.

    `message` is the generic, caller-facing summary; `error` carries the upstream text.
    """

    def __init__(self, message: str, error: str | None = None) -> None:
        super().__init__(message)
        self.error = error or message

    def to_body(self) -> dict:
        return {"message": self.message, "error": self.error}


class DocumentStoreError(UpstreamError):
    pass


class MediaUploadError(UpstreamError):
    pass


async def _portfolio_error_handler(request: Request, exc: PortfolioError) -> JSONResponse:
    if isinstance(exc, UpstreamError):
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.error)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PortfolioError, _portfolio_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
