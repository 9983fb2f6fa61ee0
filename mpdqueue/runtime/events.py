"""Tagged events carried through the merge queue."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..models import Subsystem


@dataclass(frozen=True)
class KeyEvent:
    key: str


@dataclass(frozen=True)
class ResizeEvent:
    columns: int
    lines: int


@dataclass(frozen=True)
class NotifyEvent:
    subsystems: tuple[Subsystem, ...]

    @property
    def queue_changed(self) -> bool:
        return any(subsystem.changes_queue for subsystem in self.subsystems)

    @property
    def player_changed(self) -> bool:
        return any(subsystem.changes_player for subsystem in self.subsystems)


@dataclass(frozen=True)
class TickEvent:
    pass


@dataclass(frozen=True)
class SourceFailedEvent:
    """A producer stopped for good; ``message`` is shown to the user.

    ``fatal`` failures end the session (there is no way left to interact).
    """

    source: str
    message: str
    fatal: bool = False


Event = Union[KeyEvent, ResizeEvent, NotifyEvent, TickEvent, SourceFailedEvent]
