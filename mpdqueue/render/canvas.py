"""Cell grid that frames are drawn into before being flushed as ANSI."""

from __future__ import annotations

from ..layout import Rect
from .text import char_display_width

RESET = "\033[0m"

_TOP_LEFT = "╭"
_TOP_RIGHT = "╮"
_BOTTOM_LEFT = "╰"
_BOTTOM_RIGHT = "╯"
_HORIZONTAL = "─"
_VERTICAL = "│"


class Canvas:
    """Fixed-size grid of ``(char, style)`` cells.

    A wide character occupies its own cell plus an empty placeholder cell to
    its right, so serialisation can skip the placeholder and keep columns
    aligned.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = max(0, width)
        self.height = max(0, height)
        self._chars = [[" "] * self.width for _ in range(self.height)]
        self._styles = [[""] * self.width for _ in range(self.height)]

    def char_at(self, x: int, y: int) -> str:
        return self._chars[y][x]

    def style_at(self, x: int, y: int) -> str:
        return self._styles[y][x]

    def row_text(self, y: int) -> str:
        return "".join(self._chars[y])

    def put(self, x: int, y: int, text: str, style: str = "", max_cols: int | None = None) -> int:
        """Write ``text`` starting at ``(x, y)``; return columns consumed."""
        if y < 0 or y >= self.height:
            return 0
        limit = self.width if max_cols is None else min(self.width, x + max_cols)
        col = x
        for ch in text:
            w = char_display_width(ch)
            if w == 0:
                continue
            if col + w > limit:
                break
            if col >= 0:
                self._chars[y][col] = ch
                self._styles[y][col] = style
                if w == 2:
                    self._chars[y][col + 1] = ""
                    self._styles[y][col + 1] = style
            col += w
        return col - x

    def fill(self, rect: Rect, ch: str = " ", style: str = "") -> None:
        for y in range(max(0, rect.y), min(self.height, rect.bottom)):
            for x in range(max(0, rect.x), min(self.width, rect.right)):
                self._chars[y][x] = ch
                self._styles[y][x] = style

    def box(self, rect: Rect, title: str = "", style: str = "", title_style: str = "") -> None:
        """Draw a rounded border around ``rect`` with an optional title."""
        if rect.width < 2 or rect.height < 2:
            return
        top, bottom = rect.y, rect.bottom - 1
        left, right = rect.x, rect.right - 1
        horizontal = _HORIZONTAL * (rect.width - 2)
        self.put(left, top, _TOP_LEFT + horizontal + _TOP_RIGHT, style)
        self.put(left, bottom, _BOTTOM_LEFT + horizontal + _BOTTOM_RIGHT, style)
        for y in range(top + 1, bottom):
            self.put(left, y, _VERTICAL, style)
            self.put(right, y, _VERTICAL, style)
        if title:
            self.put(left + 1, top, title, title_style or style, max_cols=rect.width - 2)

    def to_ansi(self, cursor: tuple[int, int] | None = None) -> str:
        """Serialise the grid as one full-screen ANSI frame."""
        out: list[str] = ["\033[H"]
        for y in range(self.height):
            active = ""
            for x in range(self.width):
                ch = self._chars[y][x]
                if ch == "":
                    continue
                style = self._styles[y][x]
                if style != active:
                    out.append(RESET)
                    if style:
                        out.append(style)
                    active = style
                out.append(ch)
            if active:
                out.append(RESET)
            if y < self.height - 1:
                out.append("\r\n")
        if cursor is None:
            out.append("\033[?25l")
        else:
            col, row = cursor
            col = max(0, min(col, self.width - 1))
            row = max(0, min(row, self.height - 1))
            out.append(f"\033[{row + 1};{col + 1}H\033[?25h")
        return "".join(out)
