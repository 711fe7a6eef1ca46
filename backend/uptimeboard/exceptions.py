"""Exceptions raised by the monitor definition core."""
from dataclasses import dataclass
from typing import List


class UptimeBoardError(Exception):
    """Base class for all uptimeboard errors."""


@dataclass(frozen=True)
class FieldError:
    """A single field-scoped validation message."""
    field: str  # dotted path, e.g. configuration.expectedIp.1
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class MonitorValidationError(UptimeBoardError):
    """One or more fields failed validation. Raised before any external call."""

    def __init__(self, errors: List[FieldError]):
        self.errors = list(errors)
        summary = "; ".join(f"{e.field}: {e.message}" for e in self.errors)
        super().__init__(summary or "Validation failed")

    def prefixed(self, prefix: str) -> "MonitorValidationError":
        """Return a copy with every field path nested under ``prefix``."""
        return MonitorValidationError([
            FieldError(f"{prefix}.{e.field}" if e.field else prefix, e.message)
            for e in self.errors
        ])


class SubmissionError(UptimeBoardError):
    """The external store rejected or failed a mutation."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class SubmissionInProgressError(SubmissionError):
    """A submission for the same monitor is still outstanding."""


class RegistryUnavailable(UptimeBoardError):
    """The monitor type catalog could not be fetched."""


class InvalidTransitionError(UptimeBoardError):
    """A check outcome or status overlay was rejected by the state machine."""
