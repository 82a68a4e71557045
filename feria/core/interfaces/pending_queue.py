"""Abstract interface for the terminal-side durable queue of offline sales."""

from abc import ABC, abstractmethod
from typing import Any


class IPendingSaleQueue(ABC):
    """A single named slot holding a JSON array of pending sale documents."""

    @abstractmethod
    def load(self) -> list[dict[str, Any]]:
        """Read the slot. Unreadable content is discarded and reads as empty."""
        pass

    @abstractmethod
    def save(self, entries: list[dict[str, Any]]) -> None:
        """Replace the slot content."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove the slot."""
        pass
