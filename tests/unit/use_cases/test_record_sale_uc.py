"""Tests for RecordSaleUseCase."""

import pytest

from feria.application.dto.requests import CartLineRequest, RecordSaleRequest
from feria.application.use_cases.record_sale import RecordSaleUseCase, aggregate_cart
from feria.core.entities.sale import PaymentMethod, ServingUnit
from feria.core.exceptions import NoActiveFeriaError
from feria.core.services import FeriaLifecycleManager, SaleLedger


def _request(*lines: tuple[str, str, float], payment=PaymentMethod.DIGITAL) -> RecordSaleRequest:
    return RecordSaleRequest(
        items=[CartLineRequest(style=s, unit=u, quantity=q) for s, u, q in lines],
        payment_method=payment,
    )


@pytest.fixture
def ledger(memory_store, memory_queue) -> SaleLedger:
    return SaleLedger(store=memory_store, queue=memory_queue)


@pytest.fixture
def lifecycle(memory_store) -> FeriaLifecycleManager:
    return FeriaLifecycleManager(store=memory_store)


@pytest.fixture
def use_case(ledger, lifecycle):
    return RecordSaleUseCase(ledger=ledger, lifecycle=lifecycle)


class TestAggregateCart:
    def test_merges_same_style_and_unit(self):
        items = aggregate_cart(_request(("IPA", "Pinta", 1), ("Stout", "Litro", 1), ("IPA", "Pinta", 2)))

        assert [(i.style, i.unit, i.quantity) for i in items] == [
            ("IPA", ServingUnit.PINTA, 3),
            ("Stout", ServingUnit.LITRO, 1),
        ]

    def test_keeps_units_apart(self):
        items = aggregate_cart(_request(("IPA", "Pinta", 1), ("IPA", "Litro", 1)))
        assert len(items) == 2


class TestRecordSaleUseCase:
    async def test_prices_with_active_fair(self, use_case, lifecycle, memory_store, sample_config):
        await lifecycle.save_active_config(sample_config)

        result = await use_case.execute(
            _request(("IPA", "Pinta", 2), ("Stout", "Litro", 1)),
            operator_id="ana",
        )

        assert result.sale.total_amount == 2 * 3000 + 6000
        assert result.sale.operator_id == "ana"
        assert result.queued is False
        assert result.sale.id in memory_store.sales

    async def test_operator_falls_back(self, use_case, lifecycle, sample_config):
        await lifecycle.save_active_config(sample_config)

        result = await use_case.execute(_request(("IPA", "Pinta", 1)), operator_id="  ")

        assert result.sale.operator_id == "offline_user"

    async def test_no_active_fair(self, use_case):
        with pytest.raises(NoActiveFeriaError):
            await use_case.execute(_request(("IPA", "Pinta", 1)))

    async def test_offline_sale_uses_cached_config(self, use_case, ledger, lifecycle, memory_store, sample_config):
        await lifecycle.save_active_config(sample_config)
        ledger.on_connectivity_lost()

        result = await use_case.execute(_request(("IPA", "Pinta", 1)))

        assert result.queued is True
        assert result.pending_count == 1
        assert result.sale.total_amount == 3000
        assert memory_store.calls.get("get_active_document") is None

    async def test_store_outage_falls_back_to_queue(self, use_case, lifecycle, memory_store, sample_config):
        await lifecycle.save_active_config(sample_config)
        memory_store.fail("get_active_document")
        memory_store.fail("add_sale")

        result = await use_case.execute(_request(("Stout", "Litro", 2)))

        assert result.queued is True
        assert result.sale.total_amount == 12000

    async def test_store_outage_without_cache(self, use_case, memory_store):
        memory_store.fail("get_active_document")

        with pytest.raises(NoActiveFeriaError):
            await use_case.execute(_request(("IPA", "Pinta", 1)))

    async def test_to_response(self, use_case, lifecycle, sample_config):
        await lifecycle.save_active_config(sample_config)
        result = await use_case.execute(_request(("IPA", "Pinta", 1)))

        response = use_case.to_response(result)

        assert response.queued is False
        assert response.sale.items[0].style == "IPA"
        assert response.sale.payment_method == "$ Digital"
