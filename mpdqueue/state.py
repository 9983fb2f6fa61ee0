from __future__ import annotations

import enum
from dataclasses import dataclass, field

from .models import PlaybackStatus, Track
from .search import SearchSession
from .selectable import SelectableList


class Mode(enum.Enum):
    BROWSING = "browsing"
    SEARCHING = "searching"
    SELECTING = "selecting"

    @property
    def shows_search(self) -> bool:
        return self is not Mode.BROWSING


@dataclass
class AppState:
    songs: SelectableList[Track] = field(default_factory=SelectableList)
    results: SelectableList[Track] = field(default_factory=SelectableList)
    search: SearchSession = field(default_factory=SearchSession)
    mode: Mode = Mode.BROWSING
    status: PlaybackStatus | None = None
    dirty: bool = True
    status_message: str = ""
    status_message_until: float = 0.0
