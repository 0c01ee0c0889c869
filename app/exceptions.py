# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every failure is answered with a JSON body carrying an "error" summary and,
# where available, "details" from the underlying cause. No stack traces leak.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class DiscoverBusinessException(Exception):
    """
    Base exception for the Discover Business API.

    All custom exceptions inherit from this class. The HTTP status and a
    machine-readable code travel with the exception so handlers stay generic.
    """

    def __init__(
        self,
        message: str,
        code: str = "DISCOVER_BUSINESS_ERROR",
        status_code: int = 500,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result: dict[str, Any] = {
            "error": self.message,
            "code": self.code,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Business Exceptions
# =============================================================================

class BusinessNotFoundError(DiscoverBusinessException):
    """Raised when a business ID doesn't exist."""

    def __init__(self, business_id: str):
        super().__init__(
            message="Business not found",
            code="BUSINESS_NOT_FOUND",
            status_code=404,
        )
        self.business_id = business_id


class OperationFailedError(DiscoverBusinessException):
    """
    Raised when a create/read/update/delete could not be completed.

    The message is the per-operation summary ("Failed to create business");
    the details carry the triggering error's message.
    """

    def __init__(self, summary: str, cause: Exception | str, code: str = "STORE_FAILURE"):
        super().__init__(
            message=summary,
            code=code,
            status_code=500,
            details=str(cause),
        )
        self.cause = cause


# =============================================================================
# Payload Exceptions
# =============================================================================

class InvalidPayloadError(DiscoverBusinessException):
    """Raised when a request body cannot be read as a business record."""

    def __init__(self, reason: str):
        super().__init__(
            message="Invalid request body",
            code="INVALID_PAYLOAD",
            status_code=400,
            details=reason,
        )


class TooManyAttachmentsError(DiscoverBusinessException):
    """Raised when a request carries more files than a slot accepts."""

    def __init__(self, field: str, count: int, max_count: int):
        super().__init__(
            message=f"Too many files for '{field}'",
            code="TOO_MANY_ATTACHMENTS",
            status_code=400,
            details=f"Received {count} files, at most {max_count} allowed",
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class AttachmentUploadError(DiscoverBusinessException):
    """
    Raised when the blob storage rejects or cannot store an attachment.

    Covers transport errors, timeouts, rejected formats and size limits.
    `step` names the attachment slot that failed, e.g. "productImages[2]".
    """

    def __init__(self, reason: str, filename: str | None = None, step: str | None = None):
        self.reason = reason
        self.filename = filename
        self.step = step
        super().__init__(
            message=self._describe(),
            code="UPLOAD_FAILED",
            status_code=500,
            details=reason,
        )

    def _describe(self) -> str:
        target = self.step or "attachment"
        if self.filename:
            target = f"{target} ({self.filename})"
        return f"Failed to upload {target}: {self.reason}"

    def at_step(self, step: str) -> "AttachmentUploadError":
        """Return a copy of this error labelled with the failing slot."""
        return AttachmentUploadError(self.reason, filename=self.filename, step=step)


# =============================================================================
# Exception Handlers
# =============================================================================

async def discover_business_exception_handler(
    request: Request,
    exc: DiscoverBusinessException
) -> JSONResponse:
    """
    Convert DiscoverBusinessException to JSON response.

    Returns structured error with:
    - error: Human-readable summary
    - code: Machine-readable error code
    - details: Underlying cause (if available)
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle FastAPI request validation errors (path/query parameters)."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "Validation error",
            "code": "VALIDATION_ERROR",
            "details": str(exc),
        }
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """
    Handle errors raised by the framework itself.

    Unknown routes (404), unsupported methods (405) and unreadable form
    bodies (400) get the same body shape as API errors.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "code": f"HTTP_{exc.status_code}",
        },
        headers=getattr(exc, "headers", None),
    )
