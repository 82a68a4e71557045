"""Tests for the offline-tolerant sale ledger."""

import errno
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from feria.core.entities.sale import Sale
from feria.core.exceptions import ValidationError
from feria.core.services.sale_ledger import Connectivity, SaleLedger
from feria.infrastructure.queue import JsonFilePendingQueue


@pytest.fixture
def queue_path(tmp_path: Path) -> Path:
    return tmp_path / "pending_sales_orders.json"


@pytest.fixture
def ledger(memory_store, queue_path) -> SaleLedger:
    ledger = SaleLedger(store=memory_store, queue=JsonFilePendingQueue(queue_path))
    ledger.load()
    return ledger


def _legacy_sale() -> Sale:
    return Sale.from_document(
        {
            "unit": "Pinta",
            "quantity": 1,
            "style": "IPA",
            "total_amount": 3000,
            "payment_method": "$ Digital",
            "operator_id": "op",
        }
    )


class TestOnlineRecording:
    async def test_online_sale_written_through(self, ledger, memory_store, sale_factory):
        stored = await ledger.record_sale(sale_factory())

        assert stored.id in memory_store.sales
        assert not stored.id.startswith("temp-")
        assert ledger.pending_count == 0

    async def test_failed_write_falls_back_to_queue(self, ledger, memory_store, queue_path, sale_factory):
        memory_store.fail("add_sale")

        queued = await ledger.record_sale(sale_factory())

        assert queued.id.startswith("temp-")
        assert ledger.pending_count == 1
        assert memory_store.sales == {}
        assert json.loads(queue_path.read_text())[0]["id"] == queued.id

    async def test_legacy_shape_rejected(self, ledger, memory_store):
        with pytest.raises(ValidationError):
            await ledger.record_sale(_legacy_sale())
        assert memory_store.calls.get("add_sale") is None

    async def test_unvalidated_sale_rejected_before_write(self, ledger, memory_store):
        bogus = Sale.model_construct(
            items=(),
            schema_version=2,
            total_amount=10,
            payment_method="$ Digital",
            operator_id="op",
        )
        with pytest.raises(ValidationError):
            await ledger.record_sale(bogus)
        assert memory_store.sales == {}
        assert ledger.pending_count == 0


class TestOfflineRecording:
    async def test_offline_sale_queued_with_temp_id(self, ledger, memory_store, queue_path, sale_factory):
        ledger.on_connectivity_lost()
        assert ledger.connectivity is Connectivity.OFFLINE

        queued = await ledger.record_sale(sale_factory())

        assert queued.id.startswith("temp-")
        assert memory_store.calls.get("add_sale") is None
        persisted = json.loads(queue_path.read_text())
        assert [e["client_ref"] for e in persisted] == [queued.client_ref]

    async def test_queue_survives_restart(self, memory_store, queue_path, sale_factory):
        first = SaleLedger(store=memory_store, queue=JsonFilePendingQueue(queue_path), online=False)
        first.load()
        a = await first.record_sale(sale_factory(minutes=1))
        b = await first.record_sale(sale_factory(minutes=2))

        # Terminal restarts
        second = SaleLedger(store=memory_store, queue=JsonFilePendingQueue(queue_path), online=False)
        assert second.load() == 2
        assert [s.id for s in second.pending_sales] == [a.id, b.id]
        assert second.pending_sales[0].total_amount == a.total_amount

    async def test_corrupted_queue_discarded(self, memory_store, queue_path):
        queue_path.write_text('[{"items": "nope"}]')

        ledger = SaleLedger(store=memory_store, queue=JsonFilePendingQueue(queue_path))

        assert ledger.load() == 0
        assert not queue_path.exists()

    async def test_unparseable_queue_discarded(self, memory_store, queue_path):
        queue_path.write_text("{not json")
        ledger = SaleLedger(store=memory_store, queue=JsonFilePendingQueue(queue_path))
        assert ledger.load() == 0


class TestDrain:
    async def test_restore_drains_in_fifo_order(self, ledger, memory_store, queue_path, sale_factory):
        ledger.on_connectivity_lost()
        queued = [await ledger.record_sale(sale_factory(minutes=i, total=i + 1)) for i in range(3)]

        drained = await ledger.on_connectivity_restored()

        assert drained == 3
        assert ledger.pending_count == 0
        assert not queue_path.exists()
        stored = await memory_store.list_sales()
        assert [s.client_ref for s in stored] == [q.client_ref for q in queued]
        assert all(not s.id.startswith("temp-") for s in stored)

    async def test_drain_stops_at_first_failure(self, ledger, memory_store, queue_path, sale_factory):
        ledger.on_connectivity_lost()
        for i in range(3):
            await ledger.record_sale(sale_factory(minutes=i))
        memory_store.fail("add_sale", after=1)

        drained = await ledger.on_connectivity_restored()

        assert drained == 1
        assert ledger.pending_count == 2
        assert len(json.loads(queue_path.read_text())) == 2

        # Next signal finishes the job
        assert await ledger.on_connectivity_restored() == 2
        assert len(memory_store.sales) == 3

    async def test_each_sale_lands_exactly_once(self, ledger, memory_store, sale_factory):
        ledger.on_connectivity_lost()
        sale = await ledger.record_sale(sale_factory())
        # Write made it to the store, but the terminal did not hear back
        await memory_store.add_sale(sale.without_id())

        await ledger.on_connectivity_restored()

        assert len(memory_store.sales) == 1
        assert ledger.pending_count == 0

    async def test_drain_noop_when_offline(self, ledger, memory_store, sale_factory):
        ledger.on_connectivity_lost()
        await ledger.record_sale(sale_factory())

        assert await ledger.drain() == 0
        assert ledger.pending_count == 1

    async def test_drain_after_restart(self, memory_store, queue_path, sale_factory):
        offline = SaleLedger(store=memory_store, queue=JsonFilePendingQueue(queue_path), online=False)
        offline.load()
        await offline.record_sale(sale_factory())

        restarted = SaleLedger(store=memory_store, queue=JsonFilePendingQueue(queue_path), online=False)
        restarted.load()
        assert await restarted.on_connectivity_restored() == 1
        assert len(memory_store.sales) == 1


class TestQueueWriteFailure:
    async def test_offline_sale_kept_when_queue_write_fails(self, memory_store, queue_path, sale_factory):
        queue = JsonFilePendingQueue(queue_path)
        ledger = SaleLedger(store=memory_store, queue=queue, online=False)

        with patch.object(queue, "save", side_effect=OSError(errno.ENOSPC, "No space left on device")):
            queued = await ledger.record_sale(sale_factory())

        assert queued.id.startswith("temp-")
        assert ledger.pending_count == 1
        assert not queue_path.exists()

        # The next enqueue writes the whole queue
        await ledger.record_sale(sale_factory(minutes=1))
        assert len(json.loads(queue_path.read_text())) == 2

    async def test_drain_survives_queue_write_failure(self, memory_store, queue_path, sale_factory):
        queue = JsonFilePendingQueue(queue_path)
        ledger = SaleLedger(store=memory_store, queue=queue, online=False)
        for i in range(2):
            await ledger.record_sale(sale_factory(minutes=i))

        with patch.object(queue, "save", side_effect=OSError(errno.EROFS, "Read-only file system")):
            drained = await ledger.on_connectivity_restored()

        assert drained == 2
        assert ledger.pending_count == 0
        assert len(memory_store.sales) == 2
