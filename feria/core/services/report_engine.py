"""
Report engine.

Aggregates a fair's sale stream into financial totals and per-style stock
depletion. Every derived number shown for a live fair comes from here; only
archived fairs keep a stored copy of the result.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from feria.config import get_logger
from feria.core.entities.feria import FeriaConfig
from feria.core.entities.report import ReportSummary
from feria.core.entities.sale import PaymentMethod, Sale, ServingUnit
from feria.core.services.stock_model import StockModel, round_half_up

logger = get_logger(__name__)

# Nominal pint volume in liters
PINT_VOLUME_LITERS = 0.473


@dataclass(frozen=True)
class ConsumptionLine:
    """A normalized style/unit/quantity line. ``style`` is None when unknown."""

    style: str | None
    unit: ServingUnit
    quantity: float


def normalize_sale(sale: Sale) -> list[ConsumptionLine]:
    """
    Flatten any sale shape into consumption lines.

    Structured sales yield one line per item. A legacy flattened sale yields a
    single line; a legacy ``Mixto`` sale is split evenly into a pint line and a
    liter line with no style, so it counts toward totals but not stock.
    """
    if not sale.is_legacy:
        return [ConsumptionLine(i.style, i.unit, i.quantity) for i in sale.items]

    quantity = sale.quantity or 0.0
    if sale.unit is ServingUnit.MIXED:
        half = quantity / 2
        return [
            ConsumptionLine(None, ServingUnit.PINTA, half),
            ConsumptionLine(None, ServingUnit.LITRO, half),
        ]
    return [ConsumptionLine(sale.style, sale.unit, quantity)]  # type: ignore[arg-type]


class ReportEngine:
    """Deterministic sale-stream aggregation."""

    def summarize(self, config: FeriaConfig, sales: Iterable[Sale]) -> ReportSummary:
        """
        Summarize a fair's sales.

        Sales referencing a style missing from ``config.initial_stock`` still
        count toward money and unit totals, but are left out of stock
        accounting so a style can be retired mid-fair.

        Args:
            config: Fair configuration (stock, waste allowance)
            sales: Live or archived sales

        Returns:
            ReportSummary with integer totals and one stock line per
            configured style
        """
        waste_l = max(config.waste_per_pinta_ml, 0.0) / 1000

        total_pintas = 0.0
        total_litros = 0.0
        digital_amount = 0.0
        cash_amount = 0.0
        consumed: dict[str, float] = {style: 0.0 for style in config.initial_stock}
        wastage: dict[str, float] = {style: 0.0 for style in config.initial_stock}
        sale_count = 0

        for sale in sales:
            sale_count += 1
            if sale.payment_method is PaymentMethod.DIGITAL:
                digital_amount += sale.total_amount
            else:
                cash_amount += sale.total_amount

            for line in normalize_sale(sale):
                tracked = line.style is not None and line.style in consumed
                if line.unit is ServingUnit.PINTA:
                    total_pintas += line.quantity
                    if tracked:
                        consumed[line.style] += line.quantity * PINT_VOLUME_LITERS  # type: ignore[index]
                        wastage[line.style] += line.quantity * waste_l  # type: ignore[index]
                elif line.unit is ServingUnit.LITRO:
                    total_litros += line.quantity
                    if tracked:
                        consumed[line.style] += line.quantity  # type: ignore[index]

        stock_summary = [
            StockModel.compute(
                initial,
                consumed[style],
                wastage[style],
                style=style,
            )
            for style, initial in config.initial_stock.items()
        ]

        # Round each bucket, then add, so the total always equals its parts.
        digital = round_half_up(digital_amount)
        cash = round_half_up(cash_amount)

        logger.debug(
            "report_summarized",
            feria=config.name,
            sales=sale_count,
            styles=len(stock_summary),
        )

        return ReportSummary(
            total_pintas=round_half_up(total_pintas),
            total_litros=round_half_up(total_litros),
            total_amount=digital + cash,
            digital_amount=digital,
            cash_amount=cash,
            stock_summary=stock_summary,
        )


def get_live_report(config: FeriaConfig, sales: Iterable[Sale]) -> ReportSummary:
    """Summarize the live sale stream of a fair."""
    return ReportEngine().summarize(config, sales)
