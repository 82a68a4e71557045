"""
Fair lifecycle manager.

Owns the single active-fair slot and moves fairs between the active slot and
history. Archive and activate are multi-step and not transactional across
steps: each step is idempotent (overwrite-by-name, delete-by-id-if-exists,
insert-by-client-ref-if-absent), so an interrupted operation converges when
re-run.
"""

from __future__ import annotations

from collections.abc import Awaitable, Iterator, Sequence
from datetime import UTC, datetime
from typing import TypeVar
from uuid import uuid4

from feria.config import get_logger
from feria.core.entities.feria import (
    PENDING_HISTORY_FIELD,
    FeriaActive,
    FeriaConfig,
    HistoricalFeria,
    NoActiveFeria,
)
from feria.core.entities.sale import Sale
from feria.core.exceptions import (
    HistoricalFeriaNotFoundError,
    LifecycleStepError,
    NoActiveFeriaError,
    StorageError,
)
from feria.core.interfaces.feria_store import IFeriaStore
from feria.core.services.report_engine import ReportEngine

logger = get_logger(__name__)

MAX_BATCH_SIZE = 400

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of at most ``size`` items."""
    for start in range(0, len(items), size):
        yield items[start : start + size]


def merge_resumed_sales(
    existing: HistoricalFeria | None,
    pending_history_id: str | None,
    live: list[Sale],
) -> list[Sale]:
    """
    Sales to write into the history record being archived.

    When the live stream is marked as a partial copy of ``existing`` (an
    archive or activate was interrupted part-way), the record's sales are
    kept and live sales it does not hold yet are added by ``client_ref``.
    Otherwise the live stream is the whole fair and overwrites the record.
    """
    if existing is None or existing.id != pending_history_id:
        return live
    archived_refs = {sale.client_ref for sale in existing.sales}
    added = [sale for sale in live if sale.client_ref not in archived_refs]
    return sorted([*existing.sales, *added], key=lambda sale: sale.timestamp)


class FeriaLifecycleManager:
    """
    State machine over the active slot: ``NoActiveFeria | FeriaActive``.

    Only one administrative actor should drive it at a time; there is no
    distributed lock.
    """

    def __init__(
        self,
        store: IFeriaStore,
        report_engine: ReportEngine | None = None,
        batch_size: int = MAX_BATCH_SIZE,
    ) -> None:
        if not 1 <= batch_size <= MAX_BATCH_SIZE:
            raise ValueError(f"batch_size must be between 1 and {MAX_BATCH_SIZE}")
        self._store = store
        self._engine = report_engine or ReportEngine()
        self._batch_size = batch_size
        self._last_config: FeriaConfig | None = None

    @property
    def last_known_config(self) -> FeriaConfig | None:
        """Config seen on the last successful read of the active slot."""
        return self._last_config

    async def current_state(self) -> NoActiveFeria | FeriaActive:
        """Read the active slot. A document without a name means no fair."""
        doc = await self._store.get_active_document()
        if doc and doc.get("name"):
            self._last_config = FeriaConfig.from_document(doc)
            return FeriaActive(config=self._last_config)
        self._last_config = None
        return NoActiveFeria()

    async def require_active(self, operation: str) -> FeriaConfig:
        state = await self.current_state()
        if isinstance(state, NoActiveFeria):
            raise NoActiveFeriaError(operation)
        return state.config

    async def save_active_config(self, config: FeriaConfig) -> FeriaActive:
        """Create a fair in the active slot or update the running one.

        A new fair starts from an empty live stream: sales left behind by an
        interrupted archive are removed first.
        """
        state = await self.current_state()
        if isinstance(state, NoActiveFeria):
            await self._clear_orphans("save_config")
        await self._store.set_active_config(config)
        self._last_config = config
        logger.info("active_feria_saved", feria=config.name)
        return FeriaActive(config=config)

    async def archive(self) -> HistoricalFeria:
        """
        Archive the active fair into history and empty the active slot.

        Returns:
            The historical record written (new, or overwritten by name)

        Raises:
            NoActiveFeriaError: If no fair is active
            LifecycleStepError: If a store step fails; safe to re-run
        """
        config = await self.require_active("archive")
        return await self._archive_current(config, operation="archive")

    async def activate(self, historical: HistoricalFeria) -> FeriaActive:
        """
        Put a historical fair back into the active slot.

        Whatever fair is active is archived first, even when it is the same
        fair (a re-run after an interrupted activate, or sales recorded since
        it was last activated). The live stream then holds exactly
        ``historical.sales``.

        Raises:
            LifecycleStepError: If a store step fails; safe to re-run
        """
        operation = "activate"
        state = await self._step(operation, "read_active_slot", self.current_state())

        if isinstance(state, FeriaActive):
            await self._archive_current(state.config, operation=operation)
        else:
            await self._clear_orphans(operation)

        await self._step(
            operation, "write_active_slot", self._store.set_active_config(historical.config)
        )
        self._last_config = historical.config
        if historical.id:
            await self._step(
                operation, "mark_pending_history", self._store.set_pending_history(historical.id)
            )
        inserted = await self._insert_sales(
            operation, [sale.without_id() for sale in historical.sales]
        )
        await self._step(operation, "unmark_pending_history", self._store.set_pending_history(None))

        logger.info(
            "feria_activated",
            feria=historical.name,
            historical_id=historical.id,
            sales=len(historical.sales),
            inserted=inserted,
        )
        return FeriaActive(config=historical.config)

    async def delete(self, historical_id: str) -> None:
        """Permanently delete a historical fair. The active slot is untouched."""
        deleted = await self._store.delete_history(historical_id)
        if not deleted:
            raise HistoricalFeriaNotFoundError(historical_id)
        logger.info("historical_feria_deleted", historical_id=historical_id)

    async def _archive_current(self, config: FeriaConfig, operation: str) -> HistoricalFeria:
        sales: list[Sale] = await self._step(operation, "snapshot_sales", self._store.list_sales())
        slot = await self._step(operation, "read_active_slot", self._store.get_active_document())

        existing = await self._step(
            operation, "lookup_history", self._store.find_history_by_name(config.name)
        )
        archived = merge_resumed_sales(existing, (slot or {}).get(PENDING_HISTORY_FIELD), sales)
        report = self._engine.summarize(config, archived)
        record = HistoricalFeria(
            id=existing.id if existing else uuid4().hex,
            config=config,
            sales=archived,
            report_summary=report,
            archived_at=datetime.now(UTC),
        )
        record = await self._step(operation, "save_history", self._store.save_history(record))
        await self._step(
            operation, "mark_pending_history", self._store.set_pending_history(record.id)
        )

        # The slot stays active until every chunk is gone, so a failed chunk
        # leaves a fair that archive() can be re-run on. Sales recorded after
        # the snapshot stay live and are cleaned up as orphans.
        await self._delete_sales(operation, [s.id for s in sales if s.id])
        await self._step(operation, "clear_active_slot", self._store.clear_active_config())
        self._last_config = None

        logger.info(
            "feria_archived",
            feria=config.name,
            historical_id=record.id,
            overwritten=existing is not None,
            resumed=len(archived) != len(sales),
            sales=len(archived),
            total=report.total_amount,
        )
        return record

    async def _clear_orphans(self, operation: str) -> int:
        orphans = await self._step(operation, "list_orphan_sales", self._store.list_sales())
        if not orphans:
            return 0
        logger.warning("orphan_sales_found", operation=operation, count=len(orphans))
        return await self._delete_sales(operation, [s.id for s in orphans if s.id])

    async def _delete_sales(self, operation: str, sale_ids: list[str]) -> int:
        deleted = 0
        for index, chunk in enumerate(chunked(sale_ids, self._batch_size)):
            deleted += await self._step(
                operation,
                "delete_live_sales",
                self._store.delete_sales(list(chunk)),
                chunks_done=index,
            )
            logger.debug("sales_chunk_deleted", chunk=index, size=len(chunk))
        return deleted

    async def _insert_sales(self, operation: str, sales: list[Sale]) -> int:
        inserted = 0
        for index, chunk in enumerate(chunked(sales, self._batch_size)):
            inserted += await self._step(
                operation,
                "insert_live_sales",
                self._store.insert_sales(list(chunk)),
                chunks_done=index,
            )
            logger.debug("sales_chunk_inserted", chunk=index, size=len(chunk))
        return inserted

    @staticmethod
    async def _step(
        operation: str,
        step: str,
        call: Awaitable[T],
        chunks_done: int = 0,
    ) -> T:
        try:
            return await call
        except (StorageError, OSError) as e:
            logger.error(
                "lifecycle_step_failed",
                operation=operation,
                step=step,
                chunks_done=chunks_done,
                error=str(e),
            )
            raise LifecycleStepError(operation, step, str(e), chunks_done) from e
