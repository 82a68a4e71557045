"""Fixtures for API smoke tests."""

import pytest
from httpx import ASGITransport, AsyncClient

from feria.api.dependencies import get_ledger, get_lifecycle, get_store
from feria.api.main import app
from feria.core.services import FeriaLifecycleManager, SaleLedger


@pytest.fixture
def ledger(memory_store, memory_queue) -> SaleLedger:
    return SaleLedger(store=memory_store, queue=memory_queue)


@pytest.fixture
def lifecycle(memory_store) -> FeriaLifecycleManager:
    return FeriaLifecycleManager(store=memory_store, batch_size=2)


@pytest.fixture
async def client(memory_store, ledger, lifecycle):
    app.dependency_overrides[get_store] = lambda: memory_store
    app.dependency_overrides[get_ledger] = lambda: ledger
    app.dependency_overrides[get_lifecycle] = lambda: lifecycle
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def config_payload() -> dict:
    return {
        "name": "Feria de Otoño",
        "price_per_pinta": 3000,
        "price_per_litro": 6000,
        "date_start": "2024-10-05",
        "date_end": "2024-10-06",
        "initial_stock": {"IPA": 20, "Stout": 30},
        "waste_per_pinta_ml": 20,
    }
