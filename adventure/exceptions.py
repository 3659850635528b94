"""
Custom exceptions for the application and their HTTP mapping
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ServiceException(Exception):
    """Base exception for service layer errors"""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(ServiceException):
    """Raised when a referenced entity does not exist"""

    status_code = 404


class ForbiddenError(ServiceException):
    """Raised when the caller does not own the referenced entity"""

    status_code = 403


class ValidationError(ServiceException):
    """Raised when request data is incomplete or invalid"""

    status_code = 400


class ConflictError(ServiceException):
    """Raised when an entity already exists"""

    status_code = 400


class AuthenticationError(ServiceException):
    """Raised when login credentials do not match an account"""

    status_code = 400


class LLMGenerationError(Exception):
    """Raised when the LLM provider returns nothing usable"""

    def __init__(self, message: str, provider: str = "unknown", original_error: Exception = None):
        self.message = message
        self.provider = provider
        self.original_error = original_error
        super().__init__(message)


class LLMRateLimitError(LLMGenerationError):
    """Raised when LLM API rate limit or quota is hit"""


async def service_exception_handler(request: Request, exc: ServiceException) -> JSONResponse:
    """Translate service layer exceptions into JSON error responses."""
    if exc.status_code >= 500:
        logger.error("Service error in %s: %s", request.url.path, exc, exc_info=True)
    else:
        logger.info("Request to %s rejected: %s", request.url.path, exc)

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.message,
            "type": exc.__class__.__name__,
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error in %s: %s", request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "type": "InternalError",
        },
    )
