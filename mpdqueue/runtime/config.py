"""Persistent JSON preferences.

Holds the daemon address, tick rate and key-binding overrides. The file is
only read: all access is defensive and malformed or missing config falls
back to defaults.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from ..daemon.client import DEFAULT_HOST, DEFAULT_PORT
from ..input.keymap import DEFAULT_KEYMAP, KeyMap

APP_NAME = "mpdqueue"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_TICK_MS = 500
MIN_TICK_MS = 50


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _coerce_port(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            return None
    if not isinstance(value, int):
        return None
    return value if 0 < value < 65536 else None


def _coerce_host(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def _split_mpd_host(value: object) -> tuple[str | None, str | None]:
    """Split the ``password@host`` form accepted in ``MPD_HOST``."""
    host = _coerce_host(value)
    if host is None or "@" not in host:
        return None, host
    password, _, bare_host = host.rpartition("@")
    return (password or None), _coerce_host(bare_host)


def _coerce_tick_ms(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value >= MIN_TICK_MS else None


@dataclass(frozen=True)
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    tick_ms: int = DEFAULT_TICK_MS
    keymap: KeyMap = DEFAULT_KEYMAP
    password: str | None = None

    @property
    def tick_seconds(self) -> float:
        return self.tick_ms / 1000.0


def resolve_settings(
    data: Mapping[str, object],
    environ: Mapping[str, str] | None = None,
    *,
    host: str | None = None,
    port: int | None = None,
    tick_ms: int | None = None,
    password: str | None = None,
) -> Settings:
    """Merge preferences: explicit argument > environment > config > default.

    ``MPD_HOST`` (optionally ``password@host``) and ``MPD_PORT`` follow the
    conventions of other MPD clients. Invalid values at any layer are
    skipped, not fatal.
    """
    env = os.environ if environ is None else environ
    env_password, env_host = _split_mpd_host(env.get("MPD_HOST"))
    resolved_host = _coerce_host(host) or env_host or _coerce_host(data.get("host")) or DEFAULT_HOST
    resolved_password = password or env_password
    resolved_port = (
        _coerce_port(port)
        or _coerce_port(env.get("MPD_PORT"))
        or _coerce_port(data.get("port"))
        or DEFAULT_PORT
    )
    resolved_tick = _coerce_tick_ms(tick_ms) or _coerce_tick_ms(data.get("tick_ms")) or DEFAULT_TICK_MS
    raw_keys = data.get("keys")
    keymap = DEFAULT_KEYMAP.with_overrides(raw_keys) if isinstance(raw_keys, dict) else DEFAULT_KEYMAP
    return Settings(
        host=resolved_host,
        port=resolved_port,
        tick_ms=resolved_tick,
        keymap=keymap,
        password=resolved_password,
    )
