"""Producer threads: input decoding, idle notifications and ticks."""

from __future__ import annotations

import os
import threading
import unittest
from queue import Queue

from mpd_server import FakeMpdServer

from mpdqueue.daemon.client import DaemonClient
from mpdqueue.errors import DaemonError, DaemonErrorKind
from mpdqueue.models import Subsystem
from mpdqueue.runtime.events import (
    Event,
    KeyEvent,
    NotifyEvent,
    ResizeEvent,
    SourceFailedEvent,
    TickEvent,
)
from mpdqueue.runtime.sources import InputSource, NotificationSource, TickSource, new_event_queue

JOIN_TIMEOUT = 5.0


def _drain(events: Queue[Event]) -> list[Event]:
    out: list[Event] = []
    while not events.empty():
        out.append(events.get_nowait())
    return out


class _ScriptedKeys:
    """Return scripted keys, then request stop once the script runs out."""

    def __init__(self, stop_event: threading.Event, script: list[object]) -> None:
        self._stop = stop_event
        self._script = list(script)

    def __call__(self, fd: int, timeout_ms: int) -> str:
        if not self._script:
            self._stop.set()
            return ""
        item = self._script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return str(item)


class InputSourceTests(unittest.TestCase):
    def _run(self, script: list[object], sizes: list[tuple[int, int]] | None = None) -> list[Event]:
        events = new_event_queue()
        stop_event = threading.Event()
        size_script = [os.terminal_size(size) for size in (sizes or [(80, 24)])]

        def terminal_size() -> os.terminal_size:
            return size_script.pop(0) if len(size_script) > 1 else size_script[0]

        source = InputSource(
            events,
            stop_event,
            0,
            read_key_fn=_ScriptedKeys(stop_event, script),
            terminal_size=terminal_size,
        )
        source.start()
        source.join(JOIN_TIMEOUT)
        self.assertFalse(source.alive)
        return _drain(events)

    def test_keys_are_forwarded_in_order(self) -> None:
        events = self._run(["j", "", "/", "a"])
        self.assertEqual(events, [KeyEvent("j"), KeyEvent("/"), KeyEvent("a")])

    def test_crlf_collapses_to_single_enter(self) -> None:
        events = self._run(["ENTER_CR", "ENTER_LF", "ENTER_LF"])
        self.assertEqual(events, [KeyEvent("ENTER"), KeyEvent("ENTER")])

    def test_resize_is_reported_once(self) -> None:
        events = self._run(["", "", ""], sizes=[(80, 24), (100, 30), (100, 30)])
        self.assertEqual(events, [ResizeEvent(100, 30)])

    def test_keyboard_interrupt_is_ignored(self) -> None:
        events = self._run([KeyboardInterrupt(), "q"])
        self.assertEqual(events, [KeyEvent("q")])

    def test_read_failure_is_fatal(self) -> None:
        events = self._run([OSError(5, "Input/output error")])
        self.assertEqual(len(events), 1)
        failure = events[0]
        self.assertIsInstance(failure, SourceFailedEvent)
        self.assertTrue(failure.fatal)
        self.assertEqual(failure.source, "input")


class _IdleClient:
    def __init__(self, stop_event: threading.Event, script: list[object]) -> None:
        self._stop = stop_event
        self._script = list(script)
        self.reconnects = 0
        self.reconnect_error: DaemonError | None = None
        self.closed = False

    def wait_for_change(self) -> list[Subsystem]:
        if not self._script:
            self._stop.set()
            raise DaemonError(DaemonErrorKind.DISCONNECTED, "closed")
        item = self._script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return list(item)

    def reconnect(self) -> None:
        self.reconnects += 1
        if self.reconnect_error is not None:
            raise self.reconnect_error

    def close(self) -> None:
        self.closed = True


class NotificationSourceTests(unittest.TestCase):
    def _run(self, client: _IdleClient, stop_event: threading.Event) -> list[Event]:
        events = new_event_queue()
        source = NotificationSource(events, stop_event, client)
        source.start()
        source.join(JOIN_TIMEOUT)
        self.assertFalse(source.alive)
        return _drain(events)

    def test_changes_become_notify_events(self) -> None:
        stop_event = threading.Event()
        client = _IdleClient(stop_event, [[Subsystem.PLAYER], [], [Subsystem.PLAYLIST, Subsystem.MIXER]])

        events = self._run(client, stop_event)

        self.assertEqual(
            events,
            [NotifyEvent((Subsystem.PLAYER,)), NotifyEvent((Subsystem.PLAYLIST, Subsystem.MIXER))],
        )

    def test_dropped_connection_is_retried(self) -> None:
        stop_event = threading.Event()
        client = _IdleClient(
            stop_event,
            [DaemonError(DaemonErrorKind.DISCONNECTED, "reset"), [Subsystem.PLAYER]],
        )

        events = self._run(client, stop_event)

        self.assertEqual(client.reconnects, 1)
        self.assertEqual(events, [NotifyEvent((Subsystem.PLAYER,))])

    def test_failed_reconnect_reports_source_failure(self) -> None:
        stop_event = threading.Event()
        client = _IdleClient(stop_event, [DaemonError(DaemonErrorKind.DISCONNECTED, "reset")])
        client.reconnect_error = DaemonError(DaemonErrorKind.DISCONNECTED, "refused")

        events = self._run(client, stop_event)

        self.assertEqual(len(events), 1)
        self.assertIsInstance(events[0], SourceFailedEvent)
        self.assertFalse(events[0].fatal)
        self.assertIn("refused", events[0].message)

    def test_protocol_error_is_not_retried(self) -> None:
        stop_event = threading.Event()
        client = _IdleClient(stop_event, [DaemonError(DaemonErrorKind.PROTOCOL, "bad idle")])

        events = self._run(client, stop_event)

        self.assertEqual(client.reconnects, 0)
        self.assertIsInstance(events[0], SourceFailedEvent)

    def test_stop_closes_connection(self) -> None:
        stop_event = threading.Event()
        client = _IdleClient(stop_event, [])
        source = NotificationSource(new_event_queue(), stop_event, client)
        source.stop()
        self.assertTrue(client.closed)
        self.assertTrue(stop_event.is_set())

    def test_stop_returns_while_daemon_is_idle(self) -> None:
        with FakeMpdServer() as server:
            client = DaemonClient("127.0.0.1", server.port, timeout=2.0)
            client.connect()
            events = new_event_queue()
            source = NotificationSource(events, threading.Event(), client)
            source.start()
            self.assertTrue(server.wait_for_command("idle"))

            stopper = threading.Thread(target=source.stop, daemon=True)
            stopper.start()
            stopper.join(3.0)
            source.join(3.0)

            self.assertFalse(stopper.is_alive(), "stop() blocked while idle was pending")
            self.assertFalse(source.alive)
            self.assertFalse(client.connected)
            self.assertEqual(_drain(events), [])


class TickSourceTests(unittest.TestCase):
    def test_emits_ticks_until_stopped(self) -> None:
        events = new_event_queue()
        stop_event = threading.Event()
        source = TickSource(events, stop_event, 0.01)
        source.start()

        first = events.get(timeout=JOIN_TIMEOUT)
        second = events.get(timeout=JOIN_TIMEOUT)
        source.stop()
        source.join(JOIN_TIMEOUT)

        self.assertEqual([first, second], [TickEvent(), TickEvent()])
        self.assertFalse(source.alive)

    def test_emit_gives_up_once_stopping(self) -> None:
        events: Queue[Event] = Queue(maxsize=1)
        events.put(TickEvent())
        stop_event = threading.Event()
        stop_event.set()
        source = TickSource(events, stop_event, 1.0)
        self.assertFalse(source.emit(TickEvent()))


if __name__ == "__main__":
    unittest.main()
