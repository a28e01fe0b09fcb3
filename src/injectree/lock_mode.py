from __future__ import annotations

from enum import Enum


class LockMode(Enum):
    """Select locking behavior for resolution on a scope hierarchy.

    Pass a value as ``lock_mode`` when creating a root scope; every scope
    created beneath it shares the root's choice. Resolution mutates scope
    caches without synchronization, so hierarchies used from several threads
    need ``THREAD``.
    """

    THREAD = "thread"
    """Serialize top-level ``get`` calls with one ``threading.RLock`` per hierarchy."""

    NONE = "none"
    """Disable locking; callers guarantee a single active resolution chain."""
