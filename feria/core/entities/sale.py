"""Sale domain entities.

Two document shapes exist in the live stream:

- schema version 2: structured ``items`` (one or more style/unit/quantity lines)
- schema version 1: legacy flattened ``unit``/``quantity``/``style`` fields,
  where ``unit`` may be the legacy ``Mixto`` tag

Both are read through :meth:`Sale.from_document`; new sales are always
version 2.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

LEGACY_SCHEMA_VERSION = 1
CURRENT_SCHEMA_VERSION = 2

# Fields persisted for a sale document. Anything else is dropped on write.
SALE_DOCUMENT_FIELDS = (
    "client_ref",
    "schema_version",
    "timestamp",
    "items",
    "unit",
    "quantity",
    "style",
    "total_amount",
    "payment_method",
    "operator_id",
)


class ServingUnit(str, Enum):
    """Serving units sold at the bar."""

    PINTA = "Pinta"
    LITRO = "Litro"
    MIXED = "Mixto"  # legacy records only


class PaymentMethod(str, Enum):
    """How a sale was paid."""

    DIGITAL = "$ Digital"
    CASH = "$ Billete"


class SaleItem(BaseModel):
    """One style/unit line of a sale."""

    model_config = ConfigDict(frozen=True)

    style: str = Field(..., min_length=1)
    unit: ServingUnit
    quantity: float = Field(..., gt=0)

    @field_validator("unit")
    @classmethod
    def reject_mixed(cls, v: ServingUnit) -> ServingUnit:
        if v is ServingUnit.MIXED:
            raise ValueError("mixed unit is only valid on legacy sales")
        return v


class Sale(BaseModel):
    """A recorded sale.

    ``total_amount`` is captured when the sale is created and never
    recomputed from the fair's current prices, hence the frozen model.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    client_ref: str = Field(default_factory=lambda: uuid4().hex)
    schema_version: Literal[1, 2] = CURRENT_SCHEMA_VERSION
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    items: tuple[SaleItem, ...] = ()

    # Legacy flattened shape
    unit: ServingUnit | None = None
    quantity: float | None = None
    style: str | None = None

    total_amount: float = Field(..., ge=0)
    payment_method: PaymentMethod
    operator_id: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_shape(self) -> "Sale":
        """Enforce the shape that matches ``schema_version``."""
        if self.schema_version == CURRENT_SCHEMA_VERSION:
            if not self.items:
                raise ValueError("a sale needs at least one item")
            if self.unit is not None or self.quantity is not None:
                raise ValueError("flattened unit/quantity belong to legacy sales")
        else:
            if self.items:
                raise ValueError("legacy sales carry no items")
            if self.unit is None or self.quantity is None or self.quantity <= 0:
                raise ValueError("legacy sales need a unit and a positive quantity")
        return self

    @property
    def is_legacy(self) -> bool:
        return self.schema_version == LEGACY_SCHEMA_VERSION

    def without_id(self) -> "Sale":
        """Copy of this sale with its id stripped (store assigns a new one)."""
        return self.model_copy(update={"id": None})

    def to_document(self) -> dict[str, Any]:
        """Sanitize for storage: allowed fields only, no ``None`` values, no id."""
        return self.model_dump(
            mode="json",
            include=set(SALE_DOCUMENT_FIELDS),
            exclude_none=True,
        )

    @classmethod
    def from_document(cls, doc: dict[str, Any], doc_id: str | None = None) -> "Sale":
        """Build a sale from a stored document of either schema version."""
        data = {k: doc[k] for k in SALE_DOCUMENT_FIELDS if doc.get(k) is not None}
        if "schema_version" not in data:
            data["schema_version"] = (
                CURRENT_SCHEMA_VERSION if data.get("items") else LEGACY_SCHEMA_VERSION
            )
        if "client_ref" not in data and (doc_id or doc.get("id")):
            # Old records predate idempotency keys; reuse their id.
            data["client_ref"] = str(doc_id or doc.get("id"))
        return cls(id=doc_id if doc_id is not None else doc.get("id"), **data)
