"""Exception taxonomy shared by the daemon adapter, models and renderer."""

from __future__ import annotations

import enum


class MpdQueueError(Exception):
    """Base class for all errors raised by mpdqueue."""


class DaemonErrorKind(enum.Enum):
    DISCONNECTED = "disconnected"
    PROTOCOL = "protocol"
    IO = "io"


class DaemonError(MpdQueueError):
    """A daemon call failed at the transport or protocol level.

    ``kind`` tells the event loop whether a reconnect attempt makes sense.
    """

    def __init__(self, kind: DaemonErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def disconnected(self) -> bool:
        return self.kind is DaemonErrorKind.DISCONNECTED

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class EmptyListError(MpdQueueError, IndexError):
    """Raised when a cursor operation needs at least one item."""


class RenderError(MpdQueueError):
    """Writing a frame to the terminal failed; the UI cannot continue."""
