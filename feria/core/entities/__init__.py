"""Core domain entities."""

from feria.core.entities.feria import (
    ACTIVE_SLOT_FIELDS,
    FERIA_CONFIG_FIELDS,
    PENDING_HISTORY_FIELD,
    FeriaActive,
    FeriaConfig,
    FeriaState,
    HistoricalFeria,
    NoActiveFeria,
)
from feria.core.entities.report import ReportSummary, StockSummary
from feria.core.entities.sale import (
    CURRENT_SCHEMA_VERSION,
    LEGACY_SCHEMA_VERSION,
    PaymentMethod,
    Sale,
    SaleItem,
    ServingUnit,
)

__all__ = [
    # Fair entities
    "FeriaConfig",
    "HistoricalFeria",
    "FeriaState",
    "FeriaActive",
    "NoActiveFeria",
    "FERIA_CONFIG_FIELDS",
    "ACTIVE_SLOT_FIELDS",
    "PENDING_HISTORY_FIELD",
    # Sale entities
    "Sale",
    "SaleItem",
    "ServingUnit",
    "PaymentMethod",
    "CURRENT_SCHEMA_VERSION",
    "LEGACY_SCHEMA_VERSION",
    # Report entities
    "ReportSummary",
    "StockSummary",
]
