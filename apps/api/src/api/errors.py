from __future__ import annotations

from dataclasses import dataclass

from waste_core.core.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    RemoteOperationError,
    ValidationError,
    WasteCoreError,
)


@dataclass
class ApiError(Exception):
    code: str
    message: str
    status_code: int


_DOMAIN_ERRORS: tuple[tuple[type[WasteCoreError], str, int], ...] = (
    (ValidationError, "VALIDATION_ERROR", 422),
    (PermissionDeniedError, "FORBIDDEN", 403),
    (NotFoundError, "NOT_FOUND", 404),
    (InvalidTransitionError, "INVALID_TRANSITION", 409),
    (RemoteOperationError, "UPSTREAM_FAILURE", 502),
)


def to_api_error(exc: WasteCoreError) -> ApiError:
    for error_type, code, status_code in _DOMAIN_ERRORS:
        if isinstance(exc, error_type):
            return ApiError(code, str(exc), status_code)
    return ApiError("INTERNAL_ERROR", "Unexpected domain error", 500)
