from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.platform.logger import get_logger
from app.platform.response import api_response

logger = get_logger(__name__)


class AppError(Exception):
    """Base class for errors that are safe to report to the caller verbatim."""

    code = "app_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request could not be processed."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_data(self) -> Dict[str, Any]:
        return {"error": self.code}


class EmptyInputError(AppError):
    code = "empty_input"
    default_message = "URL is required."


class InvalidUrlError(AppError):
    code = "invalid_url"
    default_message = "Invalid URL. Use a format like yoursite.com or https://yoursite.com"


class UnsupportedProtocolError(AppError):
    code = "unsupported_protocol"
    default_message = "Unsupported protocol. Only http and https URLs can be analyzed."


class BlockedTargetError(AppError):
    code = "blocked_target"
    default_message = "The target address is not allowed."


class UpstreamFetchError(AppError):
    code = "upstream_fetch_failed"
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Could not fetch the page. Check that the site is reachable."

    def __init__(
        self,
        message: Optional[str] = None,
        upstream_status: Optional[int] = None,
        upstream_reason: Optional[str] = None,
    ):
        if message is None and upstream_status is not None:
            reason = f" {upstream_reason}" if upstream_reason else ""
            message = f"Failed to fetch the page ({upstream_status}{reason})."
        super().__init__(message)
        self.upstream_status = upstream_status
        self.upstream_reason = upstream_reason

    def to_data(self) -> Dict[str, Any]:
        data = super().to_data()
        if self.upstream_status is not None:
            data["upstream_status"] = self.upstream_status
            data["upstream_reason"] = self.upstream_reason
        return data


class InternalAnalysisError(AppError):
    code = "internal_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal error while analyzing the page."


def add_exception_handlers(app):
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return api_response(
            message=exc.message,
            status_code=exc.status_code,
            data=exc.to_data(),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return api_response(message=str(exc.detail) or "Error", status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return api_response(
            message="Validation failed",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            data={"errors": exc.errors()},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return api_response(
            message="Internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
