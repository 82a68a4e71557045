"""Core interfaces (ports) for dependency injection."""

from feria.core.interfaces.feria_store import IFeriaStore
from feria.core.interfaces.pending_queue import IPendingSaleQueue

__all__ = [
    "IFeriaStore",
    "IPendingSaleQueue",
]
