"""Runtime orchestration: event sources, the consumer loop and bootstrap.

``run_app`` is imported lazily so importing the loop contracts in tests does
not pull in terminal setup.
"""

from __future__ import annotations

from .events import Event, KeyEvent, NotifyEvent, ResizeEvent, SourceFailedEvent, TickEvent
from .loop import EventLoop, LoopTiming


def run_app(*args, **kwargs):
    """Lazily import the session entrypoint."""
    from .app import run_app as _run_app

    return _run_app(*args, **kwargs)


__all__ = [
    "Event",
    "EventLoop",
    "KeyEvent",
    "LoopTiming",
    "NotifyEvent",
    "ResizeEvent",
    "SourceFailedEvent",
    "TickEvent",
    "run_app",
]
