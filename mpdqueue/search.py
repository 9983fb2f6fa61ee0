"""Live search query and its most recent result set.

The session only holds data; callers decide when to run ``query`` so key
handling stays the single place where daemon I/O is triggered.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .daemon.client import SearchFilter
from .models import Track

if TYPE_CHECKING:
    from .daemon.client import DaemonClient

# Two border characters plus the typing cursor.
SEARCH_BOX_MARGIN = 3


class SearchSession:
    def __init__(self) -> None:
        self.text = ""
        self.results: list[Track] = []

    def push_char(self, ch: str) -> None:
        self.text += ch

    def pop_char(self) -> None:
        self.text = self.text[:-1]

    def clear(self) -> None:
        self.text = ""
        self.results = []

    def query(self, client: DaemonClient) -> list[Track]:
        """Refresh ``results`` for the current text.

        An empty query clears results without contacting the daemon.
        ``DaemonError`` propagates unchanged and leaves ``results`` untouched.
        """
        if not self.text:
            self.results = []
            return self.results
        self.results = client.search(SearchFilter.title_contains(self.text))
        return self.results

    def visible_window(self, max_width: int) -> str:
        """Return the tail of the query that fits a box ``max_width`` wide."""
        width = max_width - SEARCH_BOX_MARGIN if max_width >= SEARCH_BOX_MARGIN else max_width
        width = max(0, width)
        if len(self.text) <= width:
            return self.text
        return self.text[len(self.text) - width :]
