"""Storage boundary — версионированное append-only сохранение core-состояния."""

from .codec import decode_state, dumps_state, encode_state, loads_state
from .layout import (
    LAYOUT_HISTORY,
    LAYOUT_VERSION,
    STORAGE_LAYOUT,
    check_layout_append_only,
    layout_fields,
)
from .record import (
    AccountRecord,
    LockRecord,
    RegistrarStateRecord,
    capture_state,
    rebuild_state,
)

__all__ = [
    # Layout
    "LAYOUT_HISTORY",
    "LAYOUT_VERSION",
    "STORAGE_LAYOUT",
    "check_layout_append_only",
    "layout_fields",
    # Record
    "LockRecord",
    "AccountRecord",
    "RegistrarStateRecord",
    "capture_state",
    "rebuild_state",
    # Codec
    "encode_state",
    "decode_state",
    "dumps_state",
    "loads_state",
]
