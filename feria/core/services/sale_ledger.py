"""
Sale ledger.

Accepts sales from a terminal, writing them through to the shared store while
online and parking them in a local durable queue while offline. The queue is
replayed in FIFO order when the environment signals that connectivity is back.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from feria.config import get_logger
from feria.core.entities.sale import Sale
from feria.core.exceptions import StorageError, ValidationError
from feria.core.interfaces.feria_store import IFeriaStore
from feria.core.interfaces.pending_queue import IPendingSaleQueue

logger = get_logger(__name__)

# Errors that mean "the store could not take the write right now"
WRITE_FAILURES: tuple[type[Exception], ...] = (StorageError, OSError)


class Connectivity(str, Enum):
    """Terminal connectivity as reported by the environment."""

    ONLINE = "online"
    OFFLINE = "offline"


class SaleLedger:
    """
    Offline-tolerant sale recorder for one terminal.

    The ledger does not poll; callers report transitions through
    :meth:`on_connectivity_lost` and :meth:`on_connectivity_restored`.
    """

    def __init__(
        self,
        store: IFeriaStore,
        queue: IPendingSaleQueue,
        online: bool = True,
        temp_id_prefix: str = "temp-",
    ) -> None:
        self._store = store
        self._queue = queue
        self._connectivity = Connectivity.ONLINE if online else Connectivity.OFFLINE
        self._temp_id_prefix = temp_id_prefix
        self._pending: list[Sale] = []
        self._lock = asyncio.Lock()

    @property
    def connectivity(self) -> Connectivity:
        return self._connectivity

    @property
    def is_online(self) -> bool:
        return self._connectivity is Connectivity.ONLINE

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def pending_sales(self) -> list[Sale]:
        return list(self._pending)

    def load(self) -> int:
        """
        Load the persisted queue, typically at terminal startup.

        If any entry cannot be parsed the whole queue is discarded.

        Returns:
            Number of pending sales loaded
        """
        entries = self._queue.load()
        try:
            self._pending = [Sale.from_document(e) for e in entries]
        except (PydanticValidationError, TypeError, KeyError, AttributeError) as e:
            logger.warning(
                "pending_queue_discarded",
                entries=len(entries),
                error=str(e),
            )
            self._pending = []
            self._queue.clear()

        logger.info("pending_queue_loaded", pending=len(self._pending))
        return len(self._pending)

    async def record_sale(self, sale: Sale) -> Sale:
        """
        Record a new sale.

        Online, the sale is written through to the store; a failed write is
        logged and the sale falls back to the local queue. Offline, the sale
        gets a temporary id and is queued.

        Args:
            sale: The sale to record

        Returns:
            The sale as stored (store id) or as queued (temporary id)

        Raises:
            ValidationError: If the sale is malformed; nothing is written
        """
        sale = self._validate(sale)

        if self.is_online:
            try:
                stored = await self._store.add_sale(sale.without_id())
                logger.info(
                    "sale_recorded",
                    sale_id=stored.id,
                    total=stored.total_amount,
                    operator=stored.operator_id,
                )
                return stored
            except WRITE_FAILURES as e:
                logger.warning(
                    "sale_write_failed",
                    client_ref=sale.client_ref,
                    error=str(e),
                )

        return await self._enqueue(sale)

    def on_connectivity_lost(self) -> None:
        if self.is_online:
            logger.info("connectivity_lost", pending=self.pending_count)
        self._connectivity = Connectivity.OFFLINE

    async def on_connectivity_restored(self) -> int:
        """Mark the terminal online and replay the pending queue."""
        self._connectivity = Connectivity.ONLINE
        logger.info("connectivity_restored", pending=self.pending_count)
        return await self.drain()

    async def drain(self) -> int:
        """
        Replay pending sales in FIFO order.

        Each sale is written without its temporary id, then removed from the
        persisted queue. Draining stops at the first failed write or when the
        terminal goes offline, leaving the remainder queued.

        Returns:
            Number of sales written to the store
        """
        drained = 0
        async with self._lock:
            while self._pending and self.is_online:
                sale = self._pending[0]
                try:
                    await self._store.add_sale(sale.without_id())
                except WRITE_FAILURES as e:
                    logger.warning(
                        "pending_sale_replay_failed",
                        temp_id=sale.id,
                        remaining=len(self._pending),
                        error=str(e),
                    )
                    break
                self._pending.pop(0)
                self._persist()
                drained += 1

        if drained:
            logger.info(
                "pending_sales_drained",
                drained=drained,
                remaining=len(self._pending),
            )
        return drained

    async def _enqueue(self, sale: Sale) -> Sale:
        queued = sale.model_copy(
            update={"id": f"{self._temp_id_prefix}{uuid4().hex[:12]}"}
        )
        async with self._lock:
            self._pending.append(queued)
            persisted = self._persist()

        logger.info(
            "sale_queued_offline",
            temp_id=queued.id,
            total=queued.total_amount,
            pending=len(self._pending),
            persisted=persisted,
        )
        return queued

    def _persist(self) -> bool:
        """
        Write the in-memory queue to disk.

        A failed write leaves the in-memory queue authoritative; the next
        enqueue or drain writes the whole queue again.
        """
        try:
            if self._pending:
                self._queue.save([{**s.to_document(), "id": s.id} for s in self._pending])
            else:
                self._queue.clear()
        except OSError as e:
            logger.error(
                "pending_queue_persist_failed",
                pending=len(self._pending),
                error=str(e),
            )
            return False
        return True

    @staticmethod
    def _validate(sale: Sale) -> Sale:
        if sale.is_legacy:
            raise ValidationError(
                "schema_version",
                "new sales must carry structured items",
                sale.schema_version,
            )
        try:
            # Models built with model_construct() skip validation
            return Sale.model_validate(sale.model_dump())
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(p) for p in first["loc"]) or "sale"
            raise ValidationError(field, first["msg"]) from e
