"""Pytest configuration and fixtures."""

from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import pytest

from feria.application.services import reset_services
from feria.core.entities import (
    ACTIVE_SLOT_FIELDS,
    FERIA_CONFIG_FIELDS,
    PENDING_HISTORY_FIELD,
    FeriaConfig,
    HistoricalFeria,
    PaymentMethod,
    Sale,
    SaleItem,
    ServingUnit,
)
from feria.core.exceptions import StoreUnavailableError
from feria.core.interfaces import IFeriaStore, IPendingSaleQueue


class InMemoryFeriaStore(IFeriaStore):
    """
    Dict-backed fair store with failure injection.

    ``fail("delete_sales", after=1)`` lets one call succeed, then raises
    ``StoreUnavailableError`` on the next ``times`` calls.
    """

    def __init__(self) -> None:
        self.active: dict[str, Any] | None = None
        self.sales: dict[str, Sale] = {}
        self.history: dict[str, HistoricalFeria] = {}
        self.calls: dict[str, int] = {}
        self._failures: dict[str, list[int]] = {}

    def fail(self, method: str, times: int = 1, after: int = 0) -> None:
        self._failures[method] = [after, times]

    def heal(self) -> None:
        self._failures.clear()

    def _enter(self, method: str) -> None:
        self.calls[method] = self.calls.get(method, 0) + 1
        plan = self._failures.get(method)
        if plan is None:
            return
        if plan[0] > 0:
            plan[0] -= 1
            return
        if plan[1] > 0:
            plan[1] -= 1
            raise StoreUnavailableError(method, "injected failure")

    async def get_active_document(self) -> dict[str, Any] | None:
        self._enter("get_active_document")
        return dict(self.active) if self.active is not None else None

    async def set_active_config(self, config: FeriaConfig) -> None:
        self._enter("set_active_config")
        doc = {k: v for k, v in (self.active or {}).items() if k not in FERIA_CONFIG_FIELDS}
        doc.update(config.to_document())
        self.active = doc

    async def clear_active_config(self) -> None:
        self._enter("clear_active_config")
        if self.active is not None:
            self.active = {k: v for k, v in self.active.items() if k not in ACTIVE_SLOT_FIELDS}

    async def set_pending_history(self, historical_id: str | None) -> None:
        self._enter("set_pending_history")
        doc = dict(self.active or {})
        if historical_id is None:
            doc.pop(PENDING_HISTORY_FIELD, None)
        else:
            doc[PENDING_HISTORY_FIELD] = historical_id
        self.active = doc

    async def add_sale(self, sale: Sale) -> Sale:
        self._enter("add_sale")
        for existing in self.sales.values():
            if existing.client_ref == sale.client_ref:
                return existing
        stored = sale.model_copy(update={"id": uuid4().hex})
        self.sales[stored.id] = stored
        return stored

    async def list_sales(self) -> list[Sale]:
        self._enter("list_sales")
        return sorted(self.sales.values(), key=lambda s: s.timestamp)

    async def insert_sales(self, sales: list[Sale]) -> int:
        self._enter("insert_sales")
        refs = {s.client_ref for s in self.sales.values()}
        inserted = 0
        for sale in sales:
            if sale.client_ref in refs:
                continue
            stored = sale.model_copy(update={"id": uuid4().hex})
            self.sales[stored.id] = stored
            refs.add(sale.client_ref)
            inserted += 1
        return inserted

    async def delete_sales(self, sale_ids: list[str]) -> int:
        self._enter("delete_sales")
        return sum(1 for sid in sale_ids if self.sales.pop(sid, None) is not None)

    async def find_history_by_name(self, name: str) -> HistoricalFeria | None:
        self._enter("find_history_by_name")
        return next((h for h in self.history.values() if h.name == name), None)

    async def save_history(self, feria: HistoricalFeria) -> HistoricalFeria:
        self._enter("save_history")
        saved = feria.model_copy(update={"id": feria.id or uuid4().hex})
        self.history[saved.id] = saved
        return saved

    async def get_history(self, feria_id: str) -> HistoricalFeria | None:
        self._enter("get_history")
        return self.history.get(feria_id)

    async def list_history(self) -> list[HistoricalFeria]:
        self._enter("list_history")
        return sorted(self.history.values(), key=lambda h: h.archived_at, reverse=True)

    async def delete_history(self, feria_id: str) -> bool:
        self._enter("delete_history")
        return self.history.pop(feria_id, None) is not None


class InMemoryPendingQueue(IPendingSaleQueue):
    """List-backed pending queue that records every save."""

    def __init__(self, entries: list[dict[str, Any]] | None = None) -> None:
        self.entries: list[dict[str, Any]] = list(entries or [])
        self.saves = 0

    def load(self) -> list[dict[str, Any]]:
        return list(self.entries)

    def save(self, entries: list[dict[str, Any]]) -> None:
        self.saves += 1
        self.entries = list(entries)

    def clear(self) -> None:
        self.entries = []


def make_sale(
    *items: tuple[str, str, float],
    total: float = 10.0,
    payment: PaymentMethod = PaymentMethod.DIGITAL,
    operator: str = "op-1",
    minutes: int = 0,
) -> Sale:
    """Build a structured sale from ``(style, unit, quantity)`` tuples."""
    lines = items or (("IPA", "Pinta", 1),)
    return Sale(
        items=tuple(SaleItem(style=s, unit=ServingUnit(u), quantity=q) for s, u, q in lines),
        total_amount=total,
        payment_method=payment,
        operator_id=operator,
        timestamp=datetime(2024, 10, 5, 18, 0, tzinfo=UTC) + timedelta(minutes=minutes),
    )


@pytest.fixture(autouse=True)
def _reset_singletons() -> Generator[None, None, None]:
    """Keep service singletons from leaking between tests."""
    reset_services()
    yield
    reset_services()


@pytest.fixture
def memory_store() -> InMemoryFeriaStore:
    return InMemoryFeriaStore()


@pytest.fixture
def memory_queue() -> InMemoryPendingQueue:
    return InMemoryPendingQueue()


@pytest.fixture
def sample_config() -> FeriaConfig:
    """A two-style fair with a 20 ml per pint waste allowance."""
    return FeriaConfig(
        name="Feria de Otoño",
        price_per_pinta=3000,
        price_per_litro=6000,
        initial_stock={"IPA": 20, "Stout": 30},
        waste_per_pinta_ml=20,
    )


@pytest.fixture
def sale_factory():
    """Factory for structured sales; see ``make_sale``."""
    return make_sale
