# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors carry a machine-readable code and, where possible, a hint on how to
# fix the request, not just what failed.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class ZipUploaderException(Exception):
    """
    Base exception for the Zip Uploader API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "ZIP_UPLOADER_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "error": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Request Exceptions
# =============================================================================

class ValidationError(ZipUploaderException):
    """Raised when a request is missing a field or carries an invalid value."""

    def __init__(
        self,
        message: str,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            suggestion=suggestion,
            details=details,
        )


class FileTooLargeError(ZipUploaderException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload an archive smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb}
        )


class CorruptArchiveError(ZipUploaderException):
    """Raised when the uploaded buffer is not a readable zip archive."""

    def __init__(self, error: str, entry: str | None = None):
        details: dict[str, Any] = {"error": error}
        if entry:
            details["entry"] = entry
        super().__init__(
            message=f"Corrupt or invalid zip archive: {error}",
            code="CORRUPT_ARCHIVE",
            status_code=400,
            suggestion="Re-create the archive and upload it again",
            details=details,
        )


# =============================================================================
# Storage Exceptions
# =============================================================================

class StoreOperationError(ZipUploaderException):
    """Raised when a single storage or database call fails."""

    def __init__(
        self,
        operation: str,
        error: str,
        bucket: str | None = None,
        path: str | None = None,
    ):
        details: dict[str, Any] = {"operation": operation, "error": error}
        if bucket:
            details["bucket"] = bucket
        if path:
            details["path"] = path
        super().__init__(
            message=f"Storage {operation} failed: {error}",
            code="STORE_OPERATION_FAILED",
            status_code=502,
            suggestion="Try again later or contact support if the issue persists",
            details=details,
        )


# =============================================================================
# Not Found Exceptions
# =============================================================================

class NotFoundError(ZipUploaderException):
    """Raised when a requested resource does not exist."""

    def __init__(
        self,
        message: str,
        code: str = "NOT_FOUND",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=404,
            suggestion=suggestion,
            details=details,
        )


class FolderNotFoundError(NotFoundError):
    """Raised when a folder has no objects in the given bucket."""

    def __init__(self, folder: str, bucket: str):
        super().__init__(
            message=f"Folder not found: {folder}",
            code="FOLDER_NOT_FOUND",
            suggestion="Check the folder name against GET /done",
            details={"folder": folder, "bucket": bucket},
        )


class AccountNotFoundError(NotFoundError):
    """Raised when a user account ID doesn't exist."""

    def __init__(self, user_id: str):
        super().__init__(
            message=f"Account not found: {user_id}",
            code="ACCOUNT_NOT_FOUND",
            suggestion="Check that the account id is correct",
            details={"user_id": user_id},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def zip_uploader_exception_handler(
    request: Request,
    exc: ZipUploaderException
) -> JSONResponse:
    """
    Convert ZipUploaderException to JSON response.

    Returns structured error with:
    - error: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def request_validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle FastAPI request validation errors (bad path/query/form values).
    """
    return JSONResponse(
        status_code=422,
        content={
            "error": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": str(exc)
        }
    )
