"""Report domain entities (derived, never stored on their own)."""

from pydantic import BaseModel, Field


class StockSummary(BaseModel):
    """Remaining stock of one beer style, in liters."""

    style: str
    initial: float = 0.0
    consumed_liters: float = 0.0
    wastage_liters: float = 0.0
    remaining: float = 0.0
    percentage: int = 0  # rounded for display; ``remaining`` keeps precision


class ReportSummary(BaseModel):
    """Financial and volume totals for a fair."""

    total_pintas: int = 0
    total_litros: int = 0
    total_amount: int = 0
    digital_amount: int = 0
    cash_amount: int = 0
    stock_summary: list[StockSummary] = Field(default_factory=list)

    def stock_for(self, style: str) -> StockSummary | None:
        """Return the stock line for ``style``, if the style is configured."""
        for entry in self.stock_summary:
            if entry.style == style:
                return entry
        return None
