"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

from feria.core.entities.sale import PaymentMethod


class FeriaConfigRequest(BaseModel):
    """Request to create or update the active fair."""

    name: str = Field(..., min_length=1, description="Fair name", examples=["Feria de Otoño"])
    price_per_pinta: float = Field(default=0.0, ge=0, description="Price of one pint")
    price_per_litro: float = Field(default=0.0, ge=0, description="Price of one liter")
    date_start: date | None = Field(default=None, description="First day of the fair")
    date_end: date | None = Field(default=None, description="Last day of the fair")
    initial_stock: dict[str, float] = Field(
        default_factory=dict,
        description="Initial liters per beer style",
        examples=[{"IPA": 20, "Stout": 30}],
    )
    waste_per_pinta_ml: float = Field(
        default=0.0,
        ge=0,
        description="Milliliters assumed lost per pint served",
    )


class CartLineRequest(BaseModel):
    """One cart line on the terminal."""

    style: str = Field(..., min_length=1, description="Beer style", examples=["IPA"])
    unit: Literal["Pinta", "Litro"] = Field(..., description="Serving unit")
    quantity: float = Field(..., gt=0, description="Units of this style and size")


class RecordSaleRequest(BaseModel):
    """Request to record a sale from the terminal cart."""

    items: list[CartLineRequest] = Field(..., min_length=1, description="Cart lines")
    payment_method: PaymentMethod = Field(..., description="Digital or cash")


class ConnectivityRequest(BaseModel):
    """Connectivity transition reported by the terminal environment."""

    online: bool = Field(..., description="True when the store is reachable again")
