"""Error taxonomy for the reservation core

Every error carries a ``kind`` and a human-readable ``reason``. Mapping kinds
to HTTP status codes is the request layer's job (see ``app.api.errors``).
"""

from typing import Optional


class ReservationSystemError(Exception):
    """Base class for errors raised by the core"""
    kind = "Error"

    def __init__(self, reason: str, kind: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        if kind is not None:
            self.kind = kind

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r}, reason={self.reason!r})"


class ValidationError(ReservationSystemError):
    """Malformed, missing or unknown client input"""
    UNKNOWN_FIELD = "UnknownField"
    MISSING_FIELD = "MissingField"
    MALFORMED_VALUE = "MalformedValue"

    kind = MALFORMED_VALUE


class NotFoundError(ReservationSystemError):
    """Referenced id does not exist"""
    kind = "NotFound"


class RuleError(ReservationSystemError):
    """Business constraint violated"""
    kind = "RuleViolation"


class NotOccupiedError(RuleError):
    """Clearing a table that has no seated reservation"""
    kind = "NotOccupied"


class TransitionError(ReservationSystemError):
    """Illegal reservation status change"""
    kind = "IllegalTransition"


class TerminalStateError(TransitionError):
    kind = "TerminalState"


class InvalidStatusError(TransitionError):
    kind = "InvalidStatus"


class CoordinationError(ReservationSystemError):
    """A multi-record update left, or found, the data inconsistent"""
    kind = "CoordinationFailure"


class PartialAssignmentError(CoordinationError):
    """The compensating rollback of a seating or clearing step failed"""
    kind = "PartialAssignment"


class DanglingReferenceError(CoordinationError):
    """A table references a reservation that does not exist"""
    kind = "DanglingReference"
