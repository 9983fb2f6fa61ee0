"""Single consumer of the merged event stream.

Owns ``AppState`` and the command connection exclusively. Each wake-up
handles every event already queued and then renders at most one frame, so
bursts of notifications coalesce into a single redraw. Daemon failures are
caught here and turned into a transient notice; render failures propagate.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from queue import Empty, Queue

from ..daemon.client import DaemonClient
from ..errors import DaemonError
from ..modes import ModeMachine
from ..state import AppState
from .events import Event, KeyEvent, NotifyEvent, ResizeEvent, SourceFailedEvent, TickEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoopTiming:
    """Timing constants controlling interactive loop behavior."""

    tick_seconds: float = 0.5
    notice_seconds: float = 4.0


class EventLoop:
    def __init__(
        self,
        state: AppState,
        client: DaemonClient,
        machine: ModeMachine,
        events: Queue[Event],
        render: Callable[[AppState], None],
        *,
        timing: LoopTiming = LoopTiming(),
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.state = state
        self.client = client
        self.machine = machine
        self._events = events
        self._render = render
        self._timing = timing
        self._clock = clock
        self._running = False
        self.failure: str | None = None

    def stop(self) -> None:
        self._running = False

    def run(self) -> None:
        """Consume events until a quit key or a fatal source failure."""
        self._running = True
        self.redraw()
        while self._running:
            batch = self._next_batch()
            for event in batch:
                self.dispatch(event)
                if not self._running:
                    break
            if not self._running:
                break
            self._expire_notice()
            if self.state.dirty:
                self.redraw()
        logger.info("event loop stopped")

    def _next_batch(self) -> list[Event]:
        """Wait for one event, then take whatever else is already queued."""
        try:
            batch = [self._events.get(timeout=self._timing.tick_seconds)]
        except Empty:
            return []
        while True:
            try:
                batch.append(self._events.get_nowait())
            except Empty:
                return batch

    def redraw(self) -> None:
        self._render(self.state)
        self.state.dirty = False

    def dispatch(self, event: Event) -> None:
        """Handle one event, absorbing daemon failures at this boundary."""
        try:
            self._handle(event)
        except DaemonError as exc:
            self._on_daemon_error(exc)

    def _handle(self, event: Event) -> None:
        if isinstance(event, KeyEvent):
            outcome = self.machine.handle_key(event.key)
            if outcome.quit:
                logger.info("quit requested")
                self._running = False
            elif outcome.handled:
                self.state.dirty = True
        elif isinstance(event, ResizeEvent):
            self.state.dirty = True
        elif isinstance(event, NotifyEvent):
            if event.queue_changed:
                self.refresh_queue()
            if event.player_changed:
                self.refresh_status()
            self.state.dirty = True
        elif isinstance(event, TickEvent):
            if self.state.status is not None and self.state.status.playing:
                self.refresh_status()
                self.state.dirty = True
        elif isinstance(event, SourceFailedEvent):
            self.show_notice(event.message)
            if event.fatal:
                self.failure = event.message
                self._running = False

    def refresh_queue(self) -> None:
        self.state.songs.replace_contents(self.client.queue())

    def refresh_status(self) -> bool:
        """Re-fetch the cached playback status; return whether it changed."""
        status = self.client.status()
        if status == self.state.status:
            return False
        self.state.status = status
        return True

    def show_notice(self, message: str) -> None:
        self.state.status_message = message
        self.state.status_message_until = self._clock() + self._timing.notice_seconds
        self.state.dirty = True

    def _expire_notice(self) -> None:
        if self.state.status_message and self._clock() >= self.state.status_message_until:
            self.state.status_message = ""
            self.state.status_message_until = 0.0
            self.state.dirty = True

    def _on_daemon_error(self, exc: DaemonError) -> None:
        logger.warning("daemon call failed: %s", exc)
        if not exc.disconnected:
            self.show_notice(f"Command failed: {exc.message}")
            return
        try:
            self.client.reconnect()
        except DaemonError as retry_exc:
            logger.error("reconnect to %s failed: %s", self.client.address, retry_exc)
            # Stop tick polling until a command succeeds again.
            self.state.status = None
            self.show_notice(f"Disconnected from {self.client.address}: {retry_exc.message}")
            return
        self.show_notice(f"Reconnected to {self.client.address}")
        try:
            self.refresh_queue()
            self.refresh_status()
        except DaemonError as resync_exc:
            logger.warning("resync after reconnect failed: %s", resync_exc)
