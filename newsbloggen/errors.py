from __future__ import annotations

from enum import Enum


class FailureReason(str, Enum):
    SERVICE_ERROR = "service_error"
    SCHEMA_ERROR = "schema_error"


class GenerationFailure(Exception):
    """A gateway call that did not produce a usable result."""

    reason: FailureReason = FailureReason.SERVICE_ERROR

    def __init__(self, message: str, *, reason: FailureReason | None = None) -> None:
        super().__init__(message)
        if reason is not None:
            self.reason = reason


class ServiceError(GenerationFailure):
    """Transport or availability failure of the generation service."""

    reason = FailureReason.SERVICE_ERROR


class SchemaError(GenerationFailure):
    """The service answered but the reply failed structural validation."""

    reason = FailureReason.SCHEMA_ERROR


class OperationCancelled(Exception):
    """Raised inside an operation whose caller abandoned it."""


class RevisionRejected(RuntimeError):
    """A submission refused because another revision is in flight or the state forbids it."""
