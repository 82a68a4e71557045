"""
Core business logic services.

Layer-pure services that depend only on:
- feria/core/entities/*
- feria/core/interfaces/*
- feria/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from feria.core.services.feria_lifecycle import FeriaLifecycleManager, chunked
from feria.core.services.report_engine import (
    PINT_VOLUME_LITERS,
    ConsumptionLine,
    ReportEngine,
    get_live_report,
    normalize_sale,
)
from feria.core.services.sale_ledger import Connectivity, SaleLedger
from feria.core.services.stock_model import StockModel, round_half_up

__all__ = [
    # Stock
    "StockModel",
    "round_half_up",
    # Reports
    "ReportEngine",
    "ConsumptionLine",
    "normalize_sale",
    "get_live_report",
    "PINT_VOLUME_LITERS",
    # Ledger
    "SaleLedger",
    "Connectivity",
    # Lifecycle
    "FeriaLifecycleManager",
    "chunked",
]
