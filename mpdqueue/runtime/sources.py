"""Producer threads feeding the merge queue.

Each source runs on its own daemon thread and only ever touches the shared
bounded queue and its own resources. All model state stays with the single
consumer in ``runtime.loop``.
"""

from __future__ import annotations

import logging
import os
import shutil
import threading
import time
from collections.abc import Callable
from queue import Full, Queue

from ..daemon.client import DaemonClient
from ..errors import DaemonError
from ..input import read_key
from .events import Event, KeyEvent, NotifyEvent, ResizeEvent, SourceFailedEvent, TickEvent

logger = logging.getLogger(__name__)

EVENT_QUEUE_SIZE = 64
INPUT_POLL_MS = 120
_PUT_RETRY_SECONDS = 0.1


def new_event_queue() -> Queue[Event]:
    return Queue(maxsize=EVENT_QUEUE_SIZE)


class EventSource:
    """Base class owning the thread, stop flag and queue hand-off."""

    name = "source"

    def __init__(self, events: Queue[Event], stop_event: threading.Event) -> None:
        self._events = events
        self._stop = stop_event
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        self._thread = threading.Thread(target=self._run, name=f"mpdqueue-{self.name}", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    @property
    def alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def emit(self, event: Event) -> bool:
        """Block until ``event`` is queued; give up once stopping."""
        while not self._stop.is_set():
            try:
                self._events.put(event, timeout=_PUT_RETRY_SECONDS)
                return True
            except Full:
                continue
        return False

    def _run(self) -> None:
        raise NotImplementedError


class InputSource(EventSource):
    """Decode terminal keys and notice size changes between reads."""

    name = "input"

    def __init__(
        self,
        events: Queue[Event],
        stop_event: threading.Event,
        stdin_fd: int,
        *,
        read_key_fn: Callable[..., str] = read_key,
        terminal_size: Callable[[], os.terminal_size] = lambda: shutil.get_terminal_size((80, 24)),
        poll_ms: int = INPUT_POLL_MS,
    ) -> None:
        super().__init__(events, stop_event)
        self._stdin_fd = stdin_fd
        self._read_key = read_key_fn
        self._terminal_size = terminal_size
        self._poll_ms = poll_ms

    def _run(self) -> None:
        size = self._terminal_size()
        skip_next_lf = False
        while not self._stop.is_set():
            try:
                key = self._read_key(self._stdin_fd, timeout_ms=self._poll_ms)
            except KeyboardInterrupt:
                continue
            except OSError as exc:
                logger.error("terminal input failed: %s", exc)
                self.emit(SourceFailedEvent(self.name, f"Terminal input failed: {exc}", fatal=True))
                return

            current = self._terminal_size()
            if (current.columns, current.lines) != (size.columns, size.lines):
                size = current
                if not self.emit(ResizeEvent(current.columns, current.lines)):
                    return

            if key == "":
                continue
            # Terminals differ on whether Enter sends CR, LF or CRLF.
            if skip_next_lf and key == "ENTER_LF":
                skip_next_lf = False
                continue
            skip_next_lf = key == "ENTER_CR"
            if key in {"ENTER_CR", "ENTER_LF"}:
                key = "ENTER"
            if not self.emit(KeyEvent(key)):
                return


class NotificationSource(EventSource):
    """Block in the daemon's idle command on a dedicated connection.

    A dropped connection gets one immediate reconnect attempt; if that fails
    too the source reports itself dead and exits.
    """

    name = "notifications"

    def __init__(self, events: Queue[Event], stop_event: threading.Event, client: DaemonClient) -> None:
        super().__init__(events, stop_event)
        self._client = client

    def stop(self) -> None:
        super().stop()
        # Shutting the socket down is the only way to break out of a pending idle.
        self._client.close()

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                subsystems = self._client.wait_for_change()
            except DaemonError as exc:
                if self._stop.is_set():
                    return
                logger.warning("notification listener error: %s", exc)
                failure = exc
                if exc.disconnected:
                    try:
                        self._client.reconnect()
                        continue
                    except DaemonError as retry_exc:
                        logger.error("notification listener reconnect failed: %s", retry_exc)
                        failure = retry_exc
                self.emit(SourceFailedEvent(self.name, f"Lost daemon notifications ({failure})"))
                return
            if subsystems and not self.emit(NotifyEvent(tuple(subsystems))):
                return


class TickSource(EventSource):
    """Emit ``TickEvent`` at a fixed cadence independent of other sources."""

    name = "tick"

    def __init__(
        self,
        events: Queue[Event],
        stop_event: threading.Event,
        interval_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(events, stop_event)
        self._interval = max(0.01, interval_seconds)
        self._clock = clock

    def _run(self) -> None:
        next_at = self._clock() + self._interval
        while not self._stop.wait(max(0.0, next_at - self._clock())):
            next_at += self._interval
            # After a long stall resync instead of bursting missed ticks.
            now = self._clock()
            if next_at < now:
                next_at = now + self._interval
            if not self.emit(TickEvent()):
                return
