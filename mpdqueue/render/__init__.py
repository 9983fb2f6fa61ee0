"""Rendering for the queue view and the search overlay.

Defines the immutable snapshot handed over by the event loop and turns it
into one composed ANSI frame. Nothing here reads from or writes to model
state or the daemon.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..errors import RenderError
from ..layout import PanelLayout, Rect, resolve_layout, scroll_start
from ..models import PlaybackStatus, PlayState, Track, format_seconds
from ..state import AppState, Mode
from .canvas import Canvas
from .text import center, fit_with_ellipsis

BORDER_STYLE = "\033[35m"
TITLE_STYLE = "\033[37m"
HIGHLIGHT_STYLE = "\033[35m"
PLAYING_STYLE = "\033[1m"
GAUGE_STYLE = "\033[35m"
NOTICE_STYLE = "\033[7m"
HIGHLIGHT_SYMBOL = ">> "

_STATE_LABELS = {
    PlayState.PLAY: "playing",
    PlayState.PAUSE: "paused",
    PlayState.STOP: "stopped",
}


@dataclass(frozen=True)
class RenderSnapshot:
    columns: int
    lines: int
    mode: Mode
    layout: PanelLayout
    songs: tuple[Track, ...] = ()
    songs_cursor: int | None = None
    results: tuple[Track, ...] = ()
    results_cursor: int | None = None
    selected_tags: tuple[str, ...] = ()
    status: PlaybackStatus | None = None
    now_playing: Track | None = None
    notice: str = ""


def snapshot_from_state(state: AppState, columns: int, lines: int) -> RenderSnapshot:
    """Freeze what the renderer needs from ``state`` for one frame."""
    selected = state.songs.selected()
    selected_tags = tuple(selected.tag_lines()) if selected is not None else ()
    layout = resolve_layout(
        columns,
        lines,
        mode=state.mode,
        selected_tags=selected_tags,
        has_results=bool(state.results),
        search=state.search,
    )
    now_playing = None
    if state.status is not None and state.status.song_id is not None:
        now_playing = next((track for track in state.songs if track.id == state.status.song_id), None)
    return RenderSnapshot(
        columns=columns,
        lines=lines,
        mode=state.mode,
        layout=layout,
        songs=state.songs.items,
        songs_cursor=state.songs.selected_index(),
        results=state.results.items,
        results_cursor=state.results.selected_index(),
        selected_tags=selected_tags,
        status=state.status,
        now_playing=now_playing,
        notice=state.status_message,
    )


def _draw_track_list(
    canvas: Canvas,
    rect: Rect,
    title: str,
    tracks: Sequence[Track],
    cursor: int | None,
    playing_id: int | None = None,
) -> None:
    canvas.box(rect, title, BORDER_STYLE, TITLE_STYLE)
    inner = rect.inner
    if inner.width <= 0 or inner.height <= 0:
        return
    start = scroll_start(cursor, len(tracks), inner.height)
    for row in range(inner.height):
        idx = start + row
        if idx >= len(tracks):
            break
        track = tracks[idx]
        selected = idx == cursor
        prefix = HIGHLIGHT_SYMBOL if selected else " " * len(HIGHLIGHT_SYMBOL)
        style = HIGHLIGHT_STYLE if selected else ""
        if playing_id is not None and track.id == playing_id:
            style = f"{style}{PLAYING_STYLE}"
        label = fit_with_ellipsis(prefix + track.display_title, inner.width)
        canvas.put(inner.x, inner.y + row, label, style, max_cols=inner.width)


def _draw_detail(canvas: Canvas, rect: Rect, tag_lines: Sequence[str]) -> None:
    canvas.box(rect, " Tags ")
    inner = rect.inner
    for row, line in enumerate(tag_lines[: inner.height]):
        canvas.put(inner.x, inner.y + row, center(line, inner.width), max_cols=inner.width)


def _draw_progress(canvas: Canvas, rect: Rect, status: PlaybackStatus, now_playing: Track | None) -> None:
    title = f" {now_playing.display_title} " if now_playing is not None else ""
    canvas.box(rect, title)
    inner = rect.inner
    if inner.width <= 0 or inner.height <= 0:
        return
    label = (
        f" {format_seconds(status.elapsed)}/{format_seconds(status.duration)}"
        f" {_STATE_LABELS[status.state]}"
    )
    if status.volume is not None:
        label += f" vol {status.volume}%"
    gauge_width = max(0, inner.width - len(label))
    filled = round(gauge_width * status.ratio)
    bar = "=" * filled
    if filled < gauge_width:
        bar += ">"
    canvas.put(inner.x, inner.y, bar, GAUGE_STYLE, max_cols=gauge_width)
    canvas.put(inner.x + gauge_width, inner.y, label, max_cols=inner.width - gauge_width)


def _draw_search(canvas: Canvas, snapshot: RenderSnapshot) -> None:
    layout = snapshot.layout
    if layout.search_input is None:
        return
    canvas.fill(layout.search_input)
    canvas.box(layout.search_input, " Search ")
    inner = layout.search_input.inner
    canvas.put(inner.x, inner.y, layout.search_text, max_cols=inner.width)
    if layout.search_results is not None:
        canvas.fill(layout.search_results)
        _draw_track_list(canvas, layout.search_results, " Results ", snapshot.results, snapshot.results_cursor)


def compose_frame(snapshot: RenderSnapshot) -> str:
    """Return the full ANSI frame for ``snapshot``."""
    layout = snapshot.layout
    canvas = Canvas(snapshot.columns, snapshot.lines)
    playing_id = snapshot.status.song_id if snapshot.status is not None else None
    _draw_track_list(canvas, layout.songs, " Songs ", snapshot.songs, snapshot.songs_cursor, playing_id)
    if layout.detail is not None and snapshot.selected_tags:
        _draw_detail(canvas, layout.detail, snapshot.selected_tags)
    if layout.progress is not None and snapshot.status is not None:
        _draw_progress(canvas, layout.progress, snapshot.status, snapshot.now_playing)
    if snapshot.mode.shows_search:
        _draw_search(canvas, snapshot)
    if snapshot.notice and canvas.height > 0:
        row = canvas.height - 1
        canvas.put(0, row, fit_with_ellipsis(snapshot.notice, canvas.width).ljust(canvas.width), NOTICE_STYLE)
    return canvas.to_ansi(layout.cursor)


def stdout_writer(fd: int) -> Callable[[bytes], None]:
    """Return a writer that pushes a whole buffer to ``fd``."""

    def write(data: bytes) -> None:
        view = memoryview(data)
        while view:
            written = os.write(fd, view)
            view = view[written:]

    return write


def render_frame(snapshot: RenderSnapshot, write: Callable[[bytes], None]) -> None:
    """Compose and flush one frame; terminal write failures are fatal."""
    frame = compose_frame(snapshot)
    try:
        write(frame.encode("utf-8", errors="replace"))
    except OSError as exc:
        raise RenderError(f"failed to write frame: {exc}") from exc


__all__ = [
    "RenderSnapshot",
    "compose_frame",
    "render_frame",
    "snapshot_from_state",
    "stdout_writer",
]
