"""Theme store state models.

These frozen dataclasses are the snapshots the :class:`ThemeStore` hands to
the rest of the application. They are replaced, never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..theme.models import Theme


class RequestStatus(Enum):
    """Lifecycle of the most recent random theme request.

    Values:
        IDLE: No request has been issued yet.
        PENDING: A request is in flight.
        FULFILLED: The latest request produced a theme that was applied.
        REJECTED: The latest request failed; the previous theme stays in place.
    """

    IDLE = "idle"
    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


@dataclass(frozen=True, slots=True)
class RequestState:
    """Status of the latest request along with the sequence number it belongs to.

    Attributes:
        status: Current lifecycle phase.
        request_id: Sequence number of the latest issued request (0 when idle).
        error: The failure recorded for a rejected request.
    """

    status: RequestStatus = RequestStatus.IDLE
    request_id: int = 0
    error: BaseException | None = None

    @classmethod
    def pending(cls, request_id: int) -> "RequestState":
        return cls(RequestStatus.PENDING, request_id)

    @classmethod
    def fulfilled(cls, request_id: int) -> "RequestState":
        return cls(RequestStatus.FULFILLED, request_id)

    @classmethod
    def rejected(cls, request_id: int, error: BaseException) -> "RequestState":
        return cls(RequestStatus.REJECTED, request_id, error)

    @property
    def is_pending(self) -> bool:
        return self.status is RequestStatus.PENDING

    @property
    def is_rejected(self) -> bool:
        return self.status is RequestStatus.REJECTED


@dataclass(frozen=True, slots=True)
class ThemeState:
    """Complete store snapshot: the applied theme plus the request lifecycle."""

    theme: Theme
    request: RequestState = field(default_factory=RequestState)


__all__ = ["RequestState", "RequestStatus", "ThemeState"]
