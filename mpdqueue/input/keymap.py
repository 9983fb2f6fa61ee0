"""Action-to-key bindings with config overrides."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace


@dataclass(frozen=True)
class KeyMap:
    """Key tokens bound to each user action.

    Tokens are the strings produced by ``read_key``: printable characters
    as-is, special keys by name (``ENTER``, ``ESC``, ``UP``...).
    """

    next: tuple[str, ...] = ("j", "DOWN", "TAB")
    previous: tuple[str, ...] = ("k", "UP", "SHIFT_TAB")
    first: tuple[str, ...] = ("g", "HOME")
    last: tuple[str, ...] = ("G", "END")
    search: tuple[str, ...] = ("/",)
    confirm: tuple[str, ...] = ("ENTER",)
    complete: tuple[str, ...] = ("TAB",)
    cancel: tuple[str, ...] = ("ESC",)
    erase: tuple[str, ...] = ("BACKSPACE",)
    toggle_pause: tuple[str, ...] = ("p",)
    clear_queue: tuple[str, ...] = ("c",)
    quit: tuple[str, ...] = ("q", "CTRL_C")

    @classmethod
    def action_names(cls) -> tuple[str, ...]:
        return tuple(field.name for field in fields(cls))

    def with_overrides(self, overrides: Mapping[str, object]) -> KeyMap:
        """Return a copy with valid entries of ``overrides`` applied.

        Unknown action names, non-list values and non-string tokens are
        ignored; an action whose list ends up empty keeps its default.
        """
        known = set(self.action_names())
        changes: dict[str, tuple[str, ...]] = {}
        for action, raw_keys in overrides.items():
            if action not in known:
                continue
            if isinstance(raw_keys, str):
                raw_keys = [raw_keys]
            if not isinstance(raw_keys, (list, tuple)):
                continue
            keys = tuple(key for key in raw_keys if isinstance(key, str) and key)
            if keys:
                changes[action] = keys
        return replace(self, **changes) if changes else self


DEFAULT_KEYMAP = KeyMap()
