"""Per-mode key dispatch tables."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

KeyHandler = Callable[[], bool]
FallbackHandler = Callable[[str], bool]


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback."""

    combos: tuple[str, ...]
    handler: KeyHandler


class KeyComboRegistry:
    """Exact-match key table with an optional catch-all for unbound keys.

    Handlers return ``True`` when they changed something worth redrawing.
    """

    def __init__(self, fallback: FallbackHandler | None = None) -> None:
        self._handlers: dict[str, KeyHandler] = {}
        self._fallback = fallback

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._handlers[combo] = binding.handler
        return self

    def register_bindings(self, bindings: Iterable[KeyComboBinding]) -> KeyComboRegistry:
        for binding in bindings:
            self.register_binding(binding)
        return self

    def dispatch(self, key: str) -> bool | None:
        """Run the handler bound to ``key``; ``None`` when nothing handles it."""
        handler = self._handlers.get(key)
        if handler is not None:
            return handler()
        if self._fallback is not None:
            return self._fallback(key)
        return None
