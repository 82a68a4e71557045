"""Abstract interface for the shared fair document store."""

from abc import ABC, abstractmethod
from typing import Any

from feria.core.entities.feria import FeriaConfig, HistoricalFeria
from feria.core.entities.sale import Sale


class IFeriaStore(ABC):
    """Interface for the shared store holding the active slot, live sales and history.

    Every method is a single store round trip. Methods taking a list are one
    batch write each and must be given at most one batch worth of items.
    """

    # Active slot (settings/activeFeria)

    @abstractmethod
    async def get_active_document(self) -> dict[str, Any] | None:
        """Get the raw active-slot document, including unrelated settings."""
        pass

    @abstractmethod
    async def set_active_config(self, config: FeriaConfig) -> None:
        """Write the fair fields into the active slot, keeping other settings."""
        pass

    @abstractmethod
    async def clear_active_config(self) -> None:
        """Remove the fair fields from the active slot, keeping other settings."""
        pass

    @abstractmethod
    async def set_pending_history(self, historical_id: str | None) -> None:
        """Mark the live stream as a partial copy of a history record, or unmark it."""
        pass

    # Live sales (activeSales)

    @abstractmethod
    async def add_sale(self, sale: Sale) -> Sale:
        """Insert one live sale and return it with its store id.

        A sale whose ``client_ref`` is already present is not inserted again;
        the existing record is returned instead.
        """
        pass

    @abstractmethod
    async def list_sales(self) -> list[Sale]:
        """List all live sales ordered by timestamp."""
        pass

    @abstractmethod
    async def insert_sales(self, sales: list[Sale]) -> int:
        """Insert a batch of live sales atomically. Returns rows inserted."""
        pass

    @abstractmethod
    async def delete_sales(self, sale_ids: list[str]) -> int:
        """Delete a batch of live sales by id, ignoring missing ones."""
        pass

    # History (feriaHistory)

    @abstractmethod
    async def find_history_by_name(self, name: str) -> HistoricalFeria | None:
        """Get the historical record for a fair name."""
        pass

    @abstractmethod
    async def save_history(self, feria: HistoricalFeria) -> HistoricalFeria:
        """Create or overwrite a historical record, keyed by ``feria.id``."""
        pass

    @abstractmethod
    async def get_history(self, feria_id: str) -> HistoricalFeria | None:
        """Get a historical record by id."""
        pass

    @abstractmethod
    async def list_history(self) -> list[HistoricalFeria]:
        """List historical records, most recently archived first."""
        pass

    @abstractmethod
    async def delete_history(self, feria_id: str) -> bool:
        """Delete a historical record. Returns False if it did not exist."""
        pass
