"""Input-layer public API for key decoding and key dispatch tables.

Exports are split between low-level terminal decoding (`read_key`) and the
binding primitives used by the mode state machine.
"""

from .key_registry import KeyComboBinding, KeyComboRegistry
from .keymap import DEFAULT_KEYMAP, KeyMap
from .reader import ESC_SEQUENCE_TIMEOUT_MS, _PENDING_BYTES, read_key

__all__ = [
    "read_key",
    "_PENDING_BYTES",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyComboBinding",
    "KeyComboRegistry",
    "KeyMap",
    "DEFAULT_KEYMAP",
]
