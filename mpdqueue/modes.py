"""Mode state machine that turns key tokens into model and daemon effects.

Each mode owns a disjoint ``KeyComboRegistry``. Navigation handlers are built
once and pointed at either the queue list or the results list. Daemon calls
happen before any mode transition, so a ``DaemonError`` escapes with the mode
unchanged and the user can retry in place.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .daemon.client import DaemonClient
from .input.key_registry import KeyComboBinding, KeyComboRegistry
from .input.keymap import DEFAULT_KEYMAP, KeyMap
from .models import Track
from .selectable import SelectableList
from .state import AppState, Mode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyOutcome:
    """Result of one key press.

    ``handled`` asks for a redraw; ``quit`` asks the event loop to stop.
    """

    handled: bool = False
    quit: bool = False


class ModeMachine:
    def __init__(self, state: AppState, client: DaemonClient, keymap: KeyMap = DEFAULT_KEYMAP) -> None:
        self.state = state
        self.client = client
        self.keymap = keymap
        self._quit_requested = False
        self._registries: dict[Mode, KeyComboRegistry] = {
            Mode.BROWSING: self._browsing_registry(),
            Mode.SEARCHING: self._searching_registry(),
            Mode.SELECTING: self._selecting_registry(),
        }

    @property
    def mode(self) -> Mode:
        return self.state.mode

    def handle_key(self, key: str) -> KeyOutcome:
        """Interpret ``key`` in the current mode.

        Raises ``DaemonError`` when a daemon command fails.
        """
        self._quit_requested = False
        handled = self._registries[self.state.mode].dispatch(key)
        if self._quit_requested:
            return KeyOutcome(handled=False, quit=True)
        return KeyOutcome(handled=bool(handled))

    def _navigation_bindings(self, target: Callable[[], SelectableList[Track]]) -> list[KeyComboBinding]:
        keymap = self.keymap

        def move_next() -> bool:
            items = target()
            items.next()
            return bool(items)

        def move_previous() -> bool:
            items = target()
            items.previous()
            return bool(items)

        def move_first() -> bool:
            items = target()
            items.select(0)
            return bool(items)

        def move_last() -> bool:
            items = target()
            if not items:
                return False
            items.select_last()
            return True

        return [
            KeyComboBinding(keymap.next, move_next),
            KeyComboBinding(keymap.previous, move_previous),
            KeyComboBinding(keymap.first, move_first),
            KeyComboBinding(keymap.last, move_last),
        ]

    def _enter(self, mode: Mode) -> bool:
        logger.debug("mode %s -> %s", self.state.mode.value, mode.value)
        self.state.mode = mode
        return True

    def _request_quit(self) -> bool:
        self._quit_requested = True
        return False

    # Browsing

    def _browsing_registry(self) -> KeyComboRegistry:
        keymap = self.keymap
        registry = KeyComboRegistry()
        registry.register_bindings(self._navigation_bindings(lambda: self.state.songs))
        registry.register_bindings(
            [
                KeyComboBinding(keymap.search, lambda: self._enter(Mode.SEARCHING)),
                KeyComboBinding(keymap.confirm, self._play_selected_song),
                KeyComboBinding(keymap.toggle_pause, self._toggle_pause),
                KeyComboBinding(keymap.clear_queue, self._clear_queue),
                KeyComboBinding(keymap.quit, self._request_quit),
            ]
        )
        return registry

    def _play_selected_song(self) -> bool:
        track = self.state.songs.selected()
        if track is None or track.id is None:
            return False
        self.client.play_id(track.id)
        logger.info("playing queue id %s (%s)", track.id, track.display_title)
        return True

    def _toggle_pause(self) -> bool:
        requested = self.client.toggle_pause()
        logger.info("requested %s", requested.value)
        return True

    def _clear_queue(self) -> bool:
        self.client.queue_clear()
        logger.info("cleared queue")
        return True

    # Searching

    def _searching_registry(self) -> KeyComboRegistry:
        keymap = self.keymap
        registry = KeyComboRegistry(fallback=self._type_char)
        registry.register_bindings(
            [
                KeyComboBinding(keymap.erase, self._erase_char),
                KeyComboBinding(keymap.confirm + keymap.complete, self._start_selecting),
                KeyComboBinding(keymap.cancel, lambda: self._enter(Mode.BROWSING)),
            ]
        )
        return registry

    def _type_char(self, key: str) -> bool:
        if len(key) != 1 or not key.isprintable():
            return False
        self.state.search.push_char(key)
        return self._run_search()

    def _erase_char(self) -> bool:
        self.state.search.pop_char()
        return self._run_search()

    def _run_search(self) -> bool:
        results = self.state.search.query(self.client)
        self.state.results.replace_contents(results)
        return True

    def _start_selecting(self) -> bool:
        if not self.state.results:
            return False
        self.state.results.next()
        return self._enter(Mode.SELECTING)

    # Selecting

    def _selecting_registry(self) -> KeyComboRegistry:
        keymap = self.keymap
        registry = KeyComboRegistry()
        registry.register_bindings(self._navigation_bindings(lambda: self.state.results))
        registry.register_bindings(
            [
                KeyComboBinding(keymap.confirm, self._enqueue_and_play),
                KeyComboBinding(keymap.cancel, lambda: self._enter(Mode.SEARCHING)),
            ]
        )
        return registry

    def _enqueue_and_play(self) -> bool:
        track = self.state.results.selected()
        if track is None:
            return False
        song_id = self.client.queue_add(track)
        self.client.play_id(song_id)
        logger.info("queued and playing %s as id %s", track.file, song_id)
        self.state.search.clear()
        self.state.results.clear()
        return self._enter(Mode.BROWSING)
