"""Daemon adapter over ``python-mpd2``.

Exposes the small command surface the interaction engine needs and converts
raw protocol records into ``Track``/``PlaybackStatus`` values. Every library
or socket exception is translated into ``DaemonError`` at this seam so callers
only ever handle one error type.
"""

from __future__ import annotations

import contextlib
import logging
import os
import socket
import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass

import mpd

from ..errors import DaemonError, DaemonErrorKind
from ..models import PlaybackStatus, PlayState, Subsystem, Track

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 6600
DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class SearchFilter:
    """Case-insensitive substring match of one tag against ``value``."""

    tag: str
    value: str

    @classmethod
    def title_contains(cls, text: str) -> SearchFilter:
        return cls(tag="title", value=text)


@contextlib.contextmanager
def translate_errors(action: str) -> Iterator[None]:
    """Re-raise library and socket failures from ``action`` as ``DaemonError``."""
    try:
        yield
    except mpd.ConnectionError as exc:
        raise DaemonError(DaemonErrorKind.DISCONNECTED, f"{action}: {exc or 'connection lost'}") from exc
    except (mpd.CommandError, mpd.ProtocolError) as exc:
        raise DaemonError(DaemonErrorKind.PROTOCOL, f"{action}: {exc}") from exc
    except mpd.MPDError as exc:
        raise DaemonError(DaemonErrorKind.PROTOCOL, f"{action}: {exc}") from exc
    except (ConnectionError, EOFError, TimeoutError) as exc:
        # A timed-out reply leaves the stream mid-response; only a new connection recovers.
        raise DaemonError(DaemonErrorKind.DISCONNECTED, f"{action}: {exc or 'connection lost'}") from exc
    except OSError as exc:
        raise DaemonError(DaemonErrorKind.IO, f"{action}: {exc}") from exc


def _shutdown_socket(client: mpd.MPDClient) -> None:
    """Wake any thread blocked reading from ``client`` with an EOF.

    ``disconnect`` alone waits for the buffered reader's lock, which a pending
    ``idle`` holds until the daemon answers.
    """
    fileno = getattr(client, "fileno", None)
    if fileno is None:
        return
    try:
        fd = fileno()
    except (mpd.ConnectionError, OSError):
        return
    sock = socket.socket(fileno=os.dup(fd))
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError as exc:
        logger.debug("socket shutdown failed: %s", exc)
    finally:
        sock.close()


class DaemonClient:
    """One connection to the daemon.

    The event loop owns one instance for commands; the notification listener
    owns a second one that spends its life blocked in ``idle``. Commands hold
    ``_lock`` so ``close`` from another thread waits for a woken command to
    unwind before tearing the connection down.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        *,
        password: str | None = None,
        timeout: float | None = DEFAULT_TIMEOUT_SECONDS,
        client_factory: Callable[[], mpd.MPDClient] = mpd.MPDClient,
    ) -> None:
        self.host = host
        self.port = port
        self.password = password
        self.timeout = timeout
        self._client_factory = client_factory
        self._client: mpd.MPDClient | None = None
        self._lock = threading.Lock()

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def connected(self) -> bool:
        return self._client is not None

    def connect(self) -> None:
        client = self._client_factory()
        client.timeout = self.timeout
        # idle must be allowed to block until the daemon has something to say.
        client.idletimeout = None
        with translate_errors(f"connect to {self.address}"):
            client.connect(self.host, self.port)
            if self.password:
                client.password(self.password)
        with self._lock:
            self._client = client
        logger.info("connected to %s", self.address)

    def close(self) -> None:
        client = self._client
        if client is None:
            return
        _shutdown_socket(client)
        with self._lock:
            client, self._client = self._client, None
        if client is None:
            return
        try:
            client.disconnect()
        except (mpd.MPDError, OSError) as exc:
            logger.debug("ignoring error while disconnecting from %s: %s", self.address, exc)

    def reconnect(self) -> None:
        logger.info("reconnecting to %s", self.address)
        self.close()
        self.connect()

    @contextlib.contextmanager
    def _command(self, action: str) -> Iterator[mpd.MPDClient]:
        with self._lock:
            if not self.connected:
                raise DaemonError(DaemonErrorKind.DISCONNECTED, f"not connected to {self.address}")
            with translate_errors(action):
                yield self._client

    def status(self) -> PlaybackStatus:
        with self._command("status") as client:
            record = client.status()
        return PlaybackStatus.from_mpd(record)

    def queue(self) -> list[Track]:
        with self._command("playlistinfo") as client:
            records = client.playlistinfo()
        return [Track.from_mpd(record) for record in records]

    def play(self) -> None:
        with self._command("play") as client:
            client.play()

    def pause(self) -> None:
        with self._command("pause") as client:
            client.pause(1)

    def toggle_pause(self) -> PlayState:
        """Resume when paused, pause otherwise; return the requested state."""
        if self.status().paused:
            self.play()
            return PlayState.PLAY
        self.pause()
        return PlayState.PAUSE

    def play_id(self, song_id: int) -> None:
        with self._command(f"playid {song_id}") as client:
            client.playid(song_id)

    def queue_add(self, track: Track) -> int:
        """Append ``track`` to the queue and return the id the daemon assigned."""
        if not track.file:
            raise DaemonError(DaemonErrorKind.PROTOCOL, "addid: track has no file URI")
        with self._command(f"addid {track.file}") as client:
            raw_id = client.addid(track.file)
        try:
            return int(raw_id)
        except (TypeError, ValueError) as exc:
            raise DaemonError(DaemonErrorKind.PROTOCOL, f"addid: unexpected id {raw_id!r}") from exc

    def queue_clear(self) -> None:
        with self._command("clear") as client:
            client.clear()

    def search(self, search_filter: SearchFilter) -> list[Track]:
        with self._command(f"search {search_filter.tag}") as client:
            records = client.search(search_filter.tag, search_filter.value)
        return [Track.from_mpd(record) for record in records if record.get("file")]

    def wait_for_change(self) -> list[Subsystem]:
        """Block until the daemon reports changed subsystems."""
        with self._command("idle") as client:
            names = client.idle()
        return Subsystem.parse_many(names)
