"""Typed application errors.

Every error carries an HTTP ``status_code`` and a machine-readable
``error_code``; the exception handlers in ``jobboard.main`` turn them into the
response envelope.

    AppError
    +-- ValidationError      400
    +-- UnauthorizedError    401
    +-- ForbiddenError       403
    +-- NotFoundError        404
    +-- ConflictError        400 / 409
"""

from typing import Dict, List, Optional

from fastapi import status

from jobboard.core.constants import ErrorCode


class AppError(Exception):
    """Base class for errors reported to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: str = ErrorCode.INTERNAL_SERVER_ERROR

    def __init__(
        self,
        error_code: Optional[str] = None,
        message: Optional[str] = None,
        errors: Optional[List[Dict[str, str]]] = None,
        status_code: Optional[int] = None,
    ):
        self.error_code = error_code or self.default_code
        self.message = message or self.error_code
        self.errors = errors or []
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = ErrorCode.VALIDATION_ERROR

    @classmethod
    def for_field(cls, field: str, error_code: str, code: Optional[str] = None) -> "ValidationError":
        return cls(code, errors=[{"field": field, "error_code": error_code}])

    @classmethod
    def from_errors(cls, errors) -> "ValidationError":
        """Build from pydantic/FastAPI error dicts (``loc``/``msg``)."""
        return cls(errors=[field_error(err) for err in errors])


def field_error(err: dict) -> Dict[str, str]:
    """Convert one pydantic error dict into ``{field, error_code}``."""
    loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path", "form")]
    message = err.get("msg", "invalid")
    # Errors raised from model validators are prefixed by pydantic
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return {"field": ".".join(loc), "error_code": message}


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_code = ErrorCode.UNAUTHORIZED


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_code = ErrorCode.FORBIDDEN


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_code = ErrorCode.NOT_FOUND


class ConflictError(AppError):
    """State-incompatible mutation (e.g. editing a package that is in use)."""

    status_code = status.HTTP_409_CONFLICT
    default_code = ErrorCode.VALIDATION_ERROR
