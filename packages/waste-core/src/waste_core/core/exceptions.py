class WasteCoreError(Exception):
    """Base domain exception."""


class ValidationError(WasteCoreError):
    """Raised when required input is missing or malformed before any remote call."""


class PermissionDeniedError(WasteCoreError):
    """Raised when the session role may not perform an operation."""


class NotFoundError(WasteCoreError):
    """Raised when a referenced record does not exist."""


class InvalidTransitionError(WasteCoreError):
    """Raised when a status change is outside the documented state machine."""


class RemoteOperationError(WasteCoreError):
    """Raised when a backing collaborator rejected or failed an operation."""
