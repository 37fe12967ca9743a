"""
Custom exception classes for unified error handling.

Services raise these; routers turn them into HTTP responses through
``app_error_to_http`` so the client can tell "bad input" (400) from
"permission denied" (403) and from backing-store failures (500).
"""

from fastapi import HTTPException, status


class AppBaseError(Exception):
    """Base exception for all application errors."""
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, detail: str | None = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class ValidationError(AppBaseError):
    """Raised when a required field is missing or a value breaks an invariant."""
    status_code = status.HTTP_400_BAD_REQUEST


class PermissionDeniedError(AppBaseError):
    """Raised when the caller does not own the resource it is acting on."""
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Permission denied", detail: str | None = None):
        super().__init__(message=message, detail=detail)


class NotFoundError(AppBaseError):
    """Raised when an owner-scoped lookup finds nothing."""
    status_code = status.HTTP_404_NOT_FOUND


class UpstreamError(AppBaseError):
    """Raised when Supabase (PostgREST/Storage) rejects or fails a call."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, operation: str, original_error: str):
        super().__init__(
            message=f"Backing store error during {operation}",
            detail=original_error,
        )


class InvalidTokenError(AppBaseError):
    """Raised when the access token is invalid or expired."""
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self):
        super().__init__(
            message="Invalid or expired access token",
            detail="Please sign in again.",
        )


# ── Utility: convert to HTTPException ────────────────────

def app_error_to_http(error: AppBaseError, status_code: int | None = None) -> HTTPException:
    """Convert an AppBaseError to an HTTPException with consistent JSON body."""
    return HTTPException(
        status_code=status_code or error.status_code,
        detail={
            "error": error.message,
            "detail": error.detail,
            "type": type(error).__name__,
        },
    )
