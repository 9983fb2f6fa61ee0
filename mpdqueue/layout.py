"""Panel geometry for the queue view and the search overlay.

Everything here is pure: sizes depend only on the terminal dimensions, the
active mode and what the current selection and search hold. The renderer
draws into the rectangles; the event loop never mutates them.

Playing layout::

          Song list             Tags for selected song
             |                           |
    +----------------------+----------------------+
    |                      |                      |
    |                      |                      |
    +----------------------+----------------------+
    | ================>                           |
    +---------------------------------------------+
                Progress of current song
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .search import SearchSession
from .state import Mode

SEARCH_BOX_HEIGHT = 3
PROGRESS_HEIGHT = 3
# Smallest panel edge still worth drawing a bordered box into.
MIN_SIZE = 2
DETAIL_MIN_WIDTH = 25
DETAIL_MID_WIDTH = 35
DETAIL_MAX_WIDTH = 40
# Rows kept free under the results list so the progress bar stays visible.
RESULTS_BOTTOM_MARGIN = 5


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def inner(self) -> Rect:
        """Area inside a one-cell border."""
        return Rect(self.x + 1, self.y + 1, max(0, self.width - 2), max(0, self.height - 2))


@dataclass(frozen=True)
class PanelLayout:
    screen: Rect
    songs: Rect
    detail: Rect | None = None
    progress: Rect | None = None
    search_overlay: Rect | None = None
    search_input: Rect | None = None
    search_results: Rect | None = None
    search_text: str = ""
    cursor: tuple[int, int] | None = None


def detail_width(tag_lines: Sequence[str]) -> int:
    """Bucket the detail panel width by its longest row plus borders."""
    longest = max((len(line) for line in tag_lines), default=0) + 2
    if longest <= DETAIL_MIN_WIDTH:
        return DETAIL_MIN_WIDTH
    if longest <= DETAIL_MID_WIDTH:
        return DETAIL_MID_WIDTH
    return DETAIL_MAX_WIDTH


def search_overlay_rect(screen: Rect) -> Rect:
    """Centered column for the search overlay.

    The width snaps down to a multiple of ten so the box only moves when the
    terminal size changes noticeably.
    """
    cells = screen.width % 10
    if cells >= MIN_SIZE:
        width = screen.width - cells
    else:
        width = screen.width - (cells + 10)
    if width < MIN_SIZE:
        width = screen.width
    x = screen.width // 2 - width // 2
    return Rect(x, screen.y, width, screen.height)


def search_panels(overlay: Rect, has_results: bool) -> tuple[Rect, Rect | None]:
    """Return ``(input_box, results_box)`` inside ``overlay``.

    Without results the input box floats mid-screen; with results it docks
    at the top and the results list takes the space below it.
    """
    if not has_results:
        middle = overlay.height // 2
        return Rect(overlay.x, overlay.y + max(0, middle - 1), overlay.width, SEARCH_BOX_HEIGHT), None
    input_box = Rect(overlay.x, overlay.y + 1, overlay.width, SEARCH_BOX_HEIGHT)
    results_height = overlay.height - SEARCH_BOX_HEIGHT - RESULTS_BOTTOM_MARGIN
    if results_height < MIN_SIZE:
        return input_box, None
    return input_box, Rect(overlay.x, input_box.bottom, overlay.width, results_height)


def scroll_start(cursor: int | None, count: int, visible_rows: int) -> int:
    """Return the first visible row index that keeps ``cursor`` on screen."""
    rows = max(1, visible_rows)
    if cursor is None or count <= rows:
        return 0
    return max(0, min(cursor - rows + 1, count - rows))


def resolve_layout(
    columns: int,
    lines: int,
    *,
    mode: Mode,
    selected_tags: Sequence[str] = (),
    has_results: bool = False,
    search: SearchSession | None = None,
) -> PanelLayout:
    """Compute every panel rectangle for one frame."""
    screen = Rect(0, 0, max(0, columns), max(0, lines))
    songs = screen
    detail: Rect | None = None
    progress: Rect | None = None

    list_height = screen.height - PROGRESS_HEIGHT
    if list_height >= MIN_SIZE:
        songs = Rect(screen.x, screen.y, screen.width, list_height)
        progress = Rect(screen.x, list_height, screen.width, PROGRESS_HEIGHT)
        if selected_tags:
            width = detail_width(selected_tags)
            list_width = songs.width - width
            if list_width >= MIN_SIZE:
                detail = Rect(list_width, songs.y, width, songs.height)
                songs = Rect(songs.x, songs.y, list_width, songs.height)

    if not mode.shows_search or screen.height < SEARCH_BOX_HEIGHT:
        return PanelLayout(screen=screen, songs=songs, detail=detail, progress=progress)

    overlay = search_overlay_rect(screen)
    search_input, search_results = search_panels(overlay, has_results)
    search_text = search.visible_window(search_input.width) if search is not None else ""
    cursor: tuple[int, int] | None = None
    if mode is Mode.SEARCHING or not has_results:
        cursor = (search_input.x + 1 + len(search_text), search_input.y + 1)
    return PanelLayout(
        screen=screen,
        songs=songs,
        detail=detail,
        progress=progress,
        search_overlay=overlay,
        search_input=search_input,
        search_results=search_results,
        search_text=search_text,
        cursor=cursor,
    )
