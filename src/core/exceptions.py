"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"

    # Not found errors (404)
    ACCOUNT_MISSING = "ACCOUNT_MISSING"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    DRAFT_ITEM_NOT_FOUND = "DRAFT_ITEM_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_HANDLE = "INVALID_HANDLE"
    OUTFIT_TAG_LIMIT = "OUTFIT_TAG_LIMIT"
    UNSUPPORTED_IMPORT_SOURCE = "UNSUPPORTED_IMPORT_SOURCE"
    MOCK_IMPORT = "MOCK_IMPORT"

    # Conflict errors (409)
    HANDLE_TAKEN = "HANDLE_TAKEN"
    HANDLE_RESERVED = "HANDLE_RESERVED"
    HANDLE_ALREADY_SET = "HANDLE_ALREADY_SET"
    PROVIDER_CONFLICT = "PROVIDER_CONFLICT"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    SAVE_IN_PROGRESS = "SAVE_IN_PROGRESS"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Upstream errors (502)
    IMPORT_FAILED = "IMPORT_FAILED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AuthorizationError(AppException):
    """Authorization failed."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
        )


class ValidationError(AppException):
    """Input rejected before any persistence attempt."""

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details=details,
        )


# --- Identity ---


class InvalidCredentialError(AppException):
    """Email/password pair did not match."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_CREDENTIAL,
            message="Invalid email or password",
            status_code=401,
        )


class ProviderConflictError(AppException):
    """The account exists but was created with a different sign-in method."""

    def __init__(self, email: str, expected_provider: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROVIDER_CONFLICT,
            message=f"This account signs in with '{expected_provider}'. Use that method instead.",
            status_code=409,
            details={"email": email, "provider": expected_provider},
        )


class AccountMissingError(AppException):
    """No account exists for the given identity."""

    def __init__(self, identifier: str) -> None:
        super().__init__(
            error_code=ErrorCode.ACCOUNT_MISSING,
            message=f"Account not found: {identifier}",
            status_code=404,
            details={"account": identifier},
        )


class DuplicateEmailError(AppException):
    """Another account already uses this email."""

    def __init__(self, email: str) -> None:
        super().__init__(
            error_code=ErrorCode.DUPLICATE_EMAIL,
            message="An account with this email already exists",
            status_code=409,
            details={"email": email},
        )


# --- Handles ---


class InvalidHandleError(AppException):
    """Handle fails the format rules."""

    def __init__(self, candidate: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_HANDLE,
            message="Handle must contain at least 3 letters or digits",
            status_code=400,
            details={"handle": candidate},
        )


class HandleReservedError(AppException):
    """Handle collides with a system route."""

    def __init__(self, handle: str) -> None:
        super().__init__(
            error_code=ErrorCode.HANDLE_RESERVED,
            message=f"Handle is reserved: {handle}",
            status_code=409,
            details={"handle": handle},
        )


class HandleTakenError(AppException):
    """Handle already belongs to another account."""

    def __init__(self, handle: str) -> None:
        super().__init__(
            error_code=ErrorCode.HANDLE_TAKEN,
            message=f"Handle already taken: {handle}",
            status_code=409,
            details={"handle": handle},
        )


class HandleAlreadySetError(AppException):
    """The account has already claimed a different handle."""

    def __init__(self, current: str) -> None:
        super().__init__(
            error_code=ErrorCode.HANDLE_ALREADY_SET,
            message="This account already has a handle",
            status_code=409,
            details={"handle": current},
        )


# --- Profiles ---


class ProfileNotFoundError(AppException):
    """Profile not found."""

    def __init__(self, handle: str, claimable: bool | None = None) -> None:
        details: dict[str, Any] = {"handle": handle}
        if claimable is not None:
            details["claimable"] = claimable
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {handle}",
            status_code=404,
            details=details,
        )


# --- Drafts ---


class SaveInProgressError(AppException):
    """A save is already in flight for this draft."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.SAVE_IN_PROGRESS,
            message="A save is already in progress",
            status_code=409,
        )


class DraftItemNotFoundError(AppException):
    """Item id not present in the draft."""

    def __init__(self, kind: str, item_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.DRAFT_ITEM_NOT_FOUND,
            message=f"No {kind} with id {item_id} in this draft",
            status_code=404,
            details={"kind": kind, "item_id": item_id},
        )


class OutfitTagLimitError(AppException):
    """Outfit already carries the maximum number of tags."""

    def __init__(self, limit: int) -> None:
        super().__init__(
            error_code=ErrorCode.OUTFIT_TAG_LIMIT,
            message=f"An outfit can carry at most {limit} tagged items",
            status_code=400,
            details={"limit": limit},
        )


# --- Imports ---


class UnsupportedImportSourceError(AppException):
    """The import URL is not a supported source."""

    def __init__(self, url: str) -> None:
        super().__init__(
            error_code=ErrorCode.UNSUPPORTED_IMPORT_SOURCE,
            message="Only Linktree URLs are supported for now",
            status_code=400,
            details={"url": url},
        )


class ImportFailedError(AppException):
    """The import source could not be read."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            error_code=ErrorCode.IMPORT_FAILED,
            message=f"Import failed: {reason}",
            status_code=502,
            details={"reason": reason},
        )


class MockImportError(AppException):
    """Refused to merge placeholder import data without explicit consent."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.MOCK_IMPORT,
            message="Import returned placeholder data; confirm before merging it",
            status_code=400,
        )
