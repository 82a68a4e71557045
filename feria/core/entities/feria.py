"""Fair configuration, historical record and lifecycle state entities."""

from datetime import UTC, date, datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from feria.core.entities.report import ReportSummary
from feria.core.entities.sale import Sale, ServingUnit

# Fields that identify a fair inside the active-slot document. Clearing the
# slot removes exactly these and leaves unrelated settings in place.
FERIA_CONFIG_FIELDS = (
    "name",
    "price_per_pinta",
    "price_per_litro",
    "date_start",
    "date_end",
    "initial_stock",
    "waste_per_pinta_ml",
)

# Set while the live stream is a partial copy of a history record: between
# the history write and the last delete chunk of an archive, and between the
# slot write and the last insert chunk of an activate. A re-run merges that
# record's sales back instead of overwriting them.
PENDING_HISTORY_FIELD = "pending_history_id"

# Everything the lifecycle owns in the active-slot document
ACTIVE_SLOT_FIELDS = (*FERIA_CONFIG_FIELDS, PENDING_HISTORY_FIELD)


class FeriaConfig(BaseModel):
    """Configuration of a fair: prices, dates and initial stock per style."""

    name: str = Field(..., min_length=1)
    price_per_pinta: float = Field(default=0.0, ge=0)
    price_per_litro: float = Field(default=0.0, ge=0)
    date_start: date | None = None
    date_end: date | None = None
    initial_stock: dict[str, float] = Field(default_factory=dict)  # liters per style
    waste_per_pinta_ml: float = Field(default=0.0, ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("fair name cannot be blank")
        return v

    @field_validator("initial_stock")
    @classmethod
    def non_negative_stock(cls, v: dict[str, float]) -> dict[str, float]:
        for style, liters in v.items():
            if liters < 0:
                raise ValueError(f"initial stock for {style!r} cannot be negative")
        return v

    @model_validator(mode="after")
    def check_dates(self) -> "FeriaConfig":
        if self.date_start and self.date_end and self.date_end < self.date_start:
            raise ValueError("date_end is before date_start")
        return self

    def price_for(self, unit: ServingUnit) -> float:
        """Unit price for a serving unit."""
        if unit is ServingUnit.PINTA:
            return self.price_per_pinta
        if unit is ServingUnit.LITRO:
            return self.price_per_litro
        raise ValueError(f"no price for unit {unit.value}")

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(
            mode="json",
            include=set(FERIA_CONFIG_FIELDS),
            exclude_none=True,
        )

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "FeriaConfig":
        return cls(**{k: doc[k] for k in FERIA_CONFIG_FIELDS if doc.get(k) is not None})


class HistoricalFeria(BaseModel):
    """A frozen, archived fair with its sales and report."""

    id: str | None = None
    config: FeriaConfig
    sales: list[Sale] = Field(default_factory=list)
    report_summary: ReportSummary
    archived_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def name(self) -> str:
        return self.config.name

    def to_document(self) -> dict[str, Any]:
        return {
            "config": self.config.to_document(),
            "sales": [sale.to_document() for sale in self.sales],
            "report_summary": self.report_summary.model_dump(mode="json"),
            "archived_at": self.archived_at.isoformat(),
        }

    @classmethod
    def from_document(cls, doc: dict[str, Any], doc_id: str | None = None) -> "HistoricalFeria":
        return cls(
            id=doc_id,
            config=FeriaConfig.from_document(doc["config"]),
            sales=[Sale.from_document(s) for s in doc.get("sales", [])],
            report_summary=ReportSummary.model_validate(doc.get("report_summary", {})),
            archived_at=doc["archived_at"],
        )


class NoActiveFeria(BaseModel):
    """Lifecycle state: the active slot is empty."""

    status: Literal["no_active_feria"] = "no_active_feria"


class FeriaActive(BaseModel):
    """Lifecycle state: a fair is running."""

    status: Literal["feria_active"] = "feria_active"
    config: FeriaConfig


FeriaState = Annotated[NoActiveFeria | FeriaActive, Field(discriminator="status")]
