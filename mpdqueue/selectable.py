"""Ordered container with a movable, wrap-around cursor.

One implementation backs both the main queue and the search results, so
navigation rules live in exactly one place.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Generic, TypeVar

from .errors import EmptyListError

T = TypeVar("T")


class SelectableList(Generic[T]):
    """Sequence of items plus a cursor that is ``None`` only when empty."""

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: list[T] = list(items)
        self._cursor: int | None = 0 if self._items else None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"SelectableList(len={len(self._items)}, cursor={self._cursor})"

    @property
    def items(self) -> tuple[T, ...]:
        return tuple(self._items)

    def selected_index(self) -> int | None:
        return self._cursor

    def selected(self) -> T | None:
        if self._cursor is None:
            return None
        return self._items[self._cursor]

    def select(self, index: int) -> None:
        """Select ``index``, wrapping by modulo for any non-zero index.

        ``select(7)`` on five items lands on 2. An empty list ends up with no
        cursor.
        """
        if not self._items:
            self._cursor = None
            return
        self._cursor = 0 if index == 0 else index % len(self._items)

    def select_last(self) -> None:
        if not self._items:
            raise EmptyListError("cannot select last item of an empty list")
        self._cursor = len(self._items) - 1

    def next(self) -> None:
        if not self._items:
            return
        if self._cursor is None:
            self._cursor = 0
            return
        self._cursor = 0 if self._cursor >= len(self._items) - 1 else self._cursor + 1

    def previous(self) -> None:
        if not self._items:
            return
        if self._cursor is None:
            self._cursor = 0
            return
        self._cursor = len(self._items) - 1 if self._cursor == 0 else self._cursor - 1

    def replace_contents(self, items: Iterable[T]) -> None:
        """Swap the backing items and re-derive the cursor.

        Empty → no cursor; previously empty → first item; grown → keep the
        prior index; same length or shrunk → first item.
        """
        new_items = list(items)
        old_len = len(self._items)
        old_cursor = self._cursor
        self._items = new_items
        if not new_items:
            self._cursor = None
        elif old_cursor is None:
            self._cursor = 0
        elif len(new_items) > old_len:
            self._cursor = old_cursor
        else:
            self._cursor = 0

    def clear(self) -> None:
        self.replace_contents(())
