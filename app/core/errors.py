"""Error taxonomy shared by the services and rendered by the API layer."""
from fastapi import status


class EvaluationError(Exception):
    """Base class for failures surfaced to API callers as ``{kind, message}``."""

    kind = "error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class ValidationError(EvaluationError):
    """Malformed or out-of-range input, e.g. a score outside the criterion range."""

    kind = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(EvaluationError):
    kind = "unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDenied(EvaluationError):
    """Caller is authenticated but not allowed to act on the target."""

    kind = "permission_denied"
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(EvaluationError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(EvaluationError):
    """Unique-constraint violation or a state that forbids the action."""

    kind = "conflict"
    status_code = status.HTTP_409_CONFLICT
