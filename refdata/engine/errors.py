"""
Failure taxonomy for the validation engine.

Every contract the engine enforces raises `ValidationFailure`. The message is
the literal text shown to operators, so `str(failure)` is always that message;
`kind` and `field` let callers branch without parsing it.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class FailureKind(str, Enum):
    """Machine-distinguishable class of a validation failure."""

    REQUIRED = "REQUIRED"
    LENGTH = "LENGTH"
    PATTERN = "PATTERN"
    NUMERIC = "NUMERIC"
    STRUCTURED_JSON = "STRUCTURED_JSON"
    STRUCTURED_TEMPLATE = "STRUCTURED_TEMPLATE"
    STRUCTURED_SQL = "STRUCTURED_SQL"
    CONSISTENCY = "CONSISTENCY"
    DUPLICATE = "DUPLICATE"
    LIMIT = "LIMIT"


class EngineError(Exception):
    """Base class for errors raised by the engine."""


class ValidationFailure(EngineError):
    """
    A record broke a business contract.

    Failures are deterministic for a given input, so they are never retried;
    the caller surfaces `message` and lets the operator resubmit.
    """

    def __init__(
        self,
        message: str,
        kind: FailureKind,
        field: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "kind": self.kind.value, "field": self.field}

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"kind={self.kind.value}, field={self.field!r})"
        )


class RecordNotFoundError(EngineError):
    """The identity handed to a delete does not designate a stored record."""

    def __init__(self, message: str, record_id: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.record_id = record_id


__all__ = [
    "EngineError",
    "FailureKind",
    "RecordNotFoundError",
    "ValidationFailure",
]
