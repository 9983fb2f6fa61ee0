"""Read-only copies of daemon-owned data.

MPD answers with flat ``dict[str, str]`` records; tags that carry several
values arrive as lists. These types normalize that shape once so the rest of
the client never touches raw protocol dictionaries.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass

UNTITLED = "Untitled"


def _tag_text(value: object) -> str | None:
    """Collapse one raw tag value (scalar or list) into display text."""
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        parts = [str(part) for part in value if str(part)]
        return ", ".join(parts) if parts else None
    text = str(value)
    return text if text else None


def _float_or_none(value: object) -> float | None:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _int_or_none(value: object) -> int | None:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Track:
    """One song as known to the daemon.

    ``id`` is the queue song id and is ``None`` for database search results,
    which are not in the queue yet.
    """

    file: str
    id: int | None = None
    title: str | None = None
    album: str | None = None
    artist: str | None = None
    date: str | None = None
    duration: float | None = None

    @classmethod
    def from_mpd(cls, record: Mapping[str, object]) -> Track:
        duration = _float_or_none(record.get("duration"))
        if duration is None:
            duration = _float_or_none(record.get("time"))
        return cls(
            file=_tag_text(record.get("file")) or "",
            id=_int_or_none(record.get("id")),
            title=_tag_text(record.get("title")),
            album=_tag_text(record.get("album")),
            artist=_tag_text(record.get("artist")),
            date=_tag_text(record.get("date")),
            duration=duration,
        )

    @property
    def display_title(self) -> str:
        return self.title or UNTITLED

    def tag_lines(self) -> list[str]:
        """Return detail-panel rows for the tags this track actually has."""
        tags = (
            ("Title:", self.title),
            ("Album:", self.album),
            ("Artist:", self.artist),
            ("Release Date:", self.date),
        )
        return [f"{name} {value}" for name, value in tags if value]


class PlayState(enum.Enum):
    PLAY = "play"
    PAUSE = "pause"
    STOP = "stop"

    @classmethod
    def parse(cls, value: object) -> PlayState:
        try:
            return cls(str(value))
        except ValueError:
            return cls.STOP


@dataclass(frozen=True)
class PlaybackStatus:
    """Cached snapshot of the daemon's player state.

    Value equality matters: two refreshes with no daemon-side change must
    produce equal snapshots so the loop can tell nothing moved.
    """

    state: PlayState = PlayState.STOP
    elapsed: float | None = None
    duration: float | None = None
    song_id: int | None = None
    volume: int | None = None

    @classmethod
    def from_mpd(cls, record: Mapping[str, object]) -> PlaybackStatus:
        elapsed = _float_or_none(record.get("elapsed"))
        duration = _float_or_none(record.get("duration"))
        legacy_time = record.get("time")
        if isinstance(legacy_time, str) and ":" in legacy_time:
            # Pre-0.20 daemons only report "elapsed:total" in whole seconds.
            legacy_elapsed, _, legacy_total = legacy_time.partition(":")
            if elapsed is None:
                elapsed = _float_or_none(legacy_elapsed)
            if duration is None:
                duration = _float_or_none(legacy_total)
        volume = _int_or_none(record.get("volume"))
        if volume is not None and volume < 0:
            volume = None
        return cls(
            state=PlayState.parse(record.get("state")),
            elapsed=elapsed,
            duration=duration,
            song_id=_int_or_none(record.get("songid")),
            volume=volume,
        )

    @property
    def playing(self) -> bool:
        return self.state is PlayState.PLAY

    @property
    def paused(self) -> bool:
        return self.state is PlayState.PAUSE

    @property
    def ratio(self) -> float:
        """Return elapsed/duration in ``[0, 1]``; ``0.0`` when unknown."""
        if not self.duration or self.elapsed is None or self.duration <= 0:
            return 0.0
        return max(0.0, min(1.0, self.elapsed / self.duration))


class Subsystem(enum.Enum):
    """Idle subsystems the daemon can report as changed."""

    DATABASE = "database"
    UPDATE = "update"
    STORED_PLAYLIST = "stored_playlist"
    PLAYLIST = "playlist"
    PLAYER = "player"
    MIXER = "mixer"
    OUTPUT = "output"
    OPTIONS = "options"
    PARTITION = "partition"
    STICKER = "sticker"
    SUBSCRIPTION = "subscription"
    MESSAGE = "message"
    NEIGHBOR = "neighbor"
    MOUNT = "mount"

    @classmethod
    def parse_many(cls, names: object) -> list[Subsystem]:
        """Map raw idle names to known subsystems, dropping unknown ones."""
        if isinstance(names, str):
            names = [names]
        if not isinstance(names, (list, tuple)):
            return []
        out: list[Subsystem] = []
        for name in names:
            try:
                out.append(cls(str(name)))
            except ValueError:
                continue
        return out

    @property
    def changes_queue(self) -> bool:
        return self in {Subsystem.PLAYLIST, Subsystem.STORED_PLAYLIST}

    @property
    def changes_player(self) -> bool:
        return self in {Subsystem.PLAYER, Subsystem.MIXER}


def format_seconds(seconds: float | None) -> str:
    """Format a duration as ``M:SS`` (or ``H:MM:SS``); ``--:--`` when unknown."""
    if seconds is None or seconds < 0:
        return "--:--"
    total = int(seconds)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
