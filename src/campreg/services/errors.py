"""
campreg domain exceptions.

Service-layer failures the HTTP layer knows how to surface. Both kinds are
terminal: retrying the same call cannot change the outcome. Storage errors
are not wrapped and propagate as raised by SQLAlchemy.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class CampregError(Exception):
    """
    Base exception class for campreg domain errors.

    Attributes
    ----------
    message : str
        Human-readable error message
    error_code : str
        Machine-readable error code for categorization
    status_code : int
        HTTP status the API layer responds with
    context : Dict[str, Any]
        Additional error context (ids involved)
    timestamp : datetime
        When the error occurred
    """

    status_code: int = 500
    default_code: str = "campreg_error"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.context = dict(context or {})
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "error_code": self.error_code,
            "context": {k: str(v) for k, v in self.context.items()},
            "timestamp": self.timestamp.isoformat(),
            "exception_type": self.__class__.__name__,
        }

    def __str__(self) -> str:
        return f"{self.__class__.__name__}: {self.message}"


class NotFoundError(CampregError):
    """Target user or note does not exist."""

    status_code = 404
    default_code = "not_found"


class ForbiddenError(CampregError):
    """The actor is not allowed to perform the operation."""

    status_code = 403
    default_code = "forbidden"


__all__ = ["CampregError", "NotFoundError", "ForbiddenError"]
