"""Per-style stock depletion arithmetic."""

import math

from feria.core.entities.report import StockSummary


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    ``round()`` rounds halves to even, which makes 2.5 pints display as 2.
    """
    return int(math.floor(value + 0.5))


def _clamp(value: float) -> float:
    if value is None or not math.isfinite(value) or value < 0:
        return 0.0
    return float(value)


class StockModel:
    """Pure stock computation; never raises."""

    @staticmethod
    def compute(
        initial: float,
        consumed_liters: float,
        wastage_liters: float,
        style: str = "",
    ) -> StockSummary:
        """
        Compute remaining liters and remaining percentage for one style.

        Negative or non-finite inputs are treated as zero.

        Args:
            initial: Initial stock in liters
            consumed_liters: Nominal volume served
            wastage_liters: Volume lost while serving
            style: Beer style the figures belong to

        Returns:
            StockSummary with full-precision ``remaining`` and a rounded
            ``percentage`` (0 when there is no initial stock)
        """
        initial = _clamp(initial)
        consumed_liters = _clamp(consumed_liters)
        wastage_liters = _clamp(wastage_liters)

        remaining = max(0.0, initial - consumed_liters - wastage_liters)
        percentage = round_half_up(remaining / initial * 100) if initial > 0 else 0

        return StockSummary(
            style=style,
            initial=initial,
            consumed_liters=consumed_liters,
            wastage_liters=wastage_liters,
            remaining=remaining,
            percentage=percentage,
        )
