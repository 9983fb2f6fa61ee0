"""Session bootstrap: connections, initial state, producers and the loop.

Two daemon connections are opened up front, one for commands owned by the
event loop and one parked in ``idle`` by the notification listener. Any
daemon failure before the loop starts is fatal and propagates to the CLI.
"""

from __future__ import annotations

import logging
import shutil
import sys
import threading

from ..daemon.client import DaemonClient
from ..modes import ModeMachine
from ..render import render_frame, snapshot_from_state, stdout_writer
from ..state import AppState
from .config import Settings
from .loop import EventLoop, LoopTiming
from .sources import EventSource, InputSource, NotificationSource, TickSource, new_event_queue
from .terminal import TerminalController

logger = logging.getLogger(__name__)

SOURCE_JOIN_SECONDS = 0.5


def open_connections(settings: Settings) -> tuple[DaemonClient, DaemonClient]:
    """Connect the command and notification clients, closing both on failure."""
    command = DaemonClient(settings.host, settings.port, password=settings.password)
    listener = DaemonClient(settings.host, settings.port, password=settings.password)
    try:
        command.connect()
        listener.connect()
    except BaseException:
        command.close()
        listener.close()
        raise
    return command, listener


def load_initial_state(state: AppState, client: DaemonClient) -> None:
    state.status = client.status()
    state.songs.replace_contents(client.queue())
    state.dirty = True


def run_app(settings: Settings, stdin_fd: int | None = None, stdout_fd: int | None = None) -> str | None:
    """Run one interactive session.

    Returns ``None`` on a clean quit or the failure message when the session
    had to end because a required event source died.
    """
    if stdin_fd is None:
        stdin_fd = sys.stdin.fileno()
    if stdout_fd is None:
        stdout_fd = sys.stdout.fileno()

    command, listener = open_connections(settings)
    try:
        state = AppState()
        load_initial_state(state, command)
        machine = ModeMachine(state, command, settings.keymap)
        events = new_event_queue()
        stop_event = threading.Event()
        sources: list[EventSource] = [
            InputSource(events, stop_event, stdin_fd),
            NotificationSource(events, stop_event, listener),
            TickSource(events, stop_event, settings.tick_seconds),
        ]
        write = stdout_writer(stdout_fd)

        def render(current: AppState) -> None:
            term = shutil.get_terminal_size((80, 24))
            render_frame(snapshot_from_state(current, term.columns, term.lines), write)

        loop = EventLoop(
            state,
            command,
            machine,
            events,
            render,
            timing=LoopTiming(tick_seconds=settings.tick_seconds),
        )
        terminal = TerminalController(stdin_fd, stdout_fd)
        with terminal.raw_mode():
            for source in sources:
                source.start()
            try:
                loop.run()
            finally:
                for source in sources:
                    source.stop()
                # Keep the reader from racing the shell for stdin once raw mode ends
                # and let the listener finish with its closed socket.
                for source in sources:
                    if source.alive:
                        source.join(SOURCE_JOIN_SECONDS)
    finally:
        listener.close()
        command.close()
    return loop.failure
