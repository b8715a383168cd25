from __future__ import annotations

from enum import Enum


class LockMode(Enum):
    """Select locking behavior for registration tables and resolution.

    Managers are designed for single-threaded use per instance. Pick ``THREAD``
    when one manager is shared between threads: registration mutations and
    ``get`` calls then run under a re-entrant lock, so factories may still
    resolve other services through the same manager.
    """

    THREAD = "thread"
    """Guard registrations and resolution with ``threading.RLock``."""

    NONE = "none"
    """Disable locking; callers provide external synchronization."""
