"""Custom exceptions for Workforce Manager."""


class WorkforceError(Exception):
    """Base class for all domain errors."""

    pass


class ValidationError(WorkforceError):
    """Raised when input data fails a business rule."""

    pass


class InvalidStateError(WorkforceError):
    """Raised when an asset or workflow transition is not allowed."""

    pass


class ConflictError(WorkforceError):
    """Raised when a record would duplicate an existing one."""

    pass


class PermissionDeniedError(WorkforceError):
    """Raised when the acting user may not perform the operation."""

    pass


class NotFoundError(WorkforceError):
    """Raised when a referenced record does not exist."""

    pass


class UserNotFoundError(NotFoundError):
    """Raised when a user does not exist."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class AssetNotFoundError(NotFoundError):
    """Raised when an asset does not exist."""

    def __init__(self, message: str = "Asset not found"):
        super().__init__(message)
