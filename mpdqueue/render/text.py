"""Display-width aware text shaping.

Song titles routinely contain CJK and combining characters, so clipping by
``len`` misaligns borders. These helpers measure terminal columns instead.
"""

from __future__ import annotations

import unicodedata


def char_display_width(ch: str) -> int:
    """Return terminal column width for one character.

    Combining marks and control characters consume no columns; East Asian
    wide/fullwidth characters consume two.
    """
    if unicodedata.combining(ch):
        return 0
    if unicodedata.category(ch) in {"Cc", "Cf"}:
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    return sum(char_display_width(ch) for ch in text)


def clip_to_width(text: str, max_cols: int) -> str:
    """Trim ``text`` to at most ``max_cols`` display columns."""
    if max_cols <= 0 or not text:
        return ""
    out: list[str] = []
    col = 0
    for ch in text:
        w = char_display_width(ch)
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
    return "".join(out)


def fit_with_ellipsis(text: str, max_cols: int) -> str:
    """Clip ``text`` and mark the cut with ``…`` when it does not fit."""
    if display_width(text) <= max_cols:
        return text
    if max_cols <= 1:
        return clip_to_width(text, max_cols)
    return clip_to_width(text, max_cols - 1) + "…"


def center(text: str, max_cols: int) -> str:
    clipped = clip_to_width(text, max_cols)
    pad = max(0, max_cols - display_width(clipped))
    left = pad // 2
    return " " * left + clipped + " " * (pad - left)
