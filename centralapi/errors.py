"""Domain exceptions rendered as ``ErrorResponse`` JSON by the app's handler.

Services and auth dependencies raise these; route handlers stay free of
status-code branching.
"""

from __future__ import annotations


class CentralApiError(Exception):
    """Base error carrying the HTTP status and a stable machine-readable code."""

    status_code: int = 500
    code: str = "internal_error"
    retryable: bool = False

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ValidationFailedError(CentralApiError):
    status_code = 422
    code = "validation_error"


class NotAuthenticatedError(CentralApiError):
    status_code = 401
    code = "not_authenticated"


class InvalidCredentialsError(NotAuthenticatedError):
    code = "invalid_credentials"

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class TokenExpiredError(NotAuthenticatedError):
    code = "token_expired"

    def __init__(self) -> None:
        super().__init__("Token has expired")


class InvalidTokenError(NotAuthenticatedError):
    code = "invalid_token"


class PermissionDeniedError(CentralApiError):
    status_code = 403
    code = "forbidden"


class AccountArchivedError(PermissionDeniedError):
    code = "account_archived"

    def __init__(self) -> None:
        super().__init__("This account has been archived")


class NotFoundError(CentralApiError):
    status_code = 404
    code = "not_found"


class UserNotFoundError(NotFoundError):
    code = "user_not_found"

    def __init__(self, user_id: int | str) -> None:
        super().__init__(f"User {user_id} not found")


class CollectionNotFoundError(NotFoundError):
    code = "collection_not_found"

    def __init__(self, collection_id: int) -> None:
        super().__init__(f"Collection {collection_id} not found")


class ImageNotFoundError(NotFoundError):
    code = "image_not_found"

    def __init__(self, image_id: int) -> None:
        super().__init__(f"Image {image_id} not found")


class EmailAlreadyUsedError(CentralApiError):
    status_code = 409
    code = "email_already_used"

    def __init__(self) -> None:
        super().__init__("Email already in use")


class FileTooLargeError(CentralApiError):
    status_code = 413
    code = "file_too_large"

    def __init__(self, max_mb: int) -> None:
        super().__init__(f"Image exceeds {max_mb} MB limit")


class UnsupportedMediaTypeError(CentralApiError):
    status_code = 415
    code = "unsupported_media_type"

    def __init__(self, content_type: str) -> None:
        super().__init__(f"Expected an image upload, got {content_type or 'unknown'}")


class StorageError(CentralApiError):
    status_code = 502
    code = "storage_error"
    retryable = True
