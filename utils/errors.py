from typing import Dict, Optional


class AppError(Exception):
    """Base class for failures that map onto a client-visible status."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class MissingCredential(AppError):
    status_code = 400
    default_message = "Missing username from session cookie"


class InvalidCredential(AppError):
    status_code = 401
    default_message = "Invalid session credential"


class StaleCredential(AppError):
    status_code = 401
    default_message = "Session refers to an account that no longer exists"


class InvalidLogin(AppError):
    status_code = 401
    default_message = "Username or password incorrect"


class StoreUnavailable(AppError):
    status_code = 500
    default_message = "Could not get a database connection"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class DuplicateSwipe(AppError):
    status_code = 409
    default_message = "You have already swiped on this user"


class UsernameTaken(AppError):
    status_code = 409
    default_message = "Username already taken"


class InvalidSwipeTarget(AppError):
    status_code = 400
    default_message = "Cannot swipe on yourself"


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request body"


class BlobStorageError(AppError):
    status_code = 500
    default_message = "Failed to access stored media"
