"""
Points calculation.

Converts sales amounts into the points score used for tier qualification.
"""

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal

from compensation.constants import (
    DIRECT_SALES_POINTS_WEIGHT,
    DOWNLINE_SALES_POINTS_WEIGHT,
    POINTS_ROLLOVER_RATE,
    POINTS_SALES_UNIT,
)
from compensation.utils.money import to_decimal


class PointsCalculator:
    """
    Pure points calculator.

    Direct sales count at full weight, downline sales at a reduced weight
    because the affiliate did not make the sale personally.
    """

    def __init__(
        self,
        direct_weight: Decimal = DIRECT_SALES_POINTS_WEIGHT,
        downline_weight: Decimal = DOWNLINE_SALES_POINTS_WEIGHT,
        sales_unit: Decimal = POINTS_SALES_UNIT,
    ) -> None:
        if sales_unit <= 0:
            raise ValueError("sales_unit must be positive")
        self.direct_weight = direct_weight
        self.downline_weight = downline_weight
        self.sales_unit = sales_unit

    def points(
        self,
        direct_sales_amount: Decimal,
        downline_sales_amount: Decimal,
    ) -> int:
        """
        Calculate points for direct and downline sales.

        Formula: (direct * direct_weight + downline * downline_weight) / unit,
        rounded half-up to an integer. Negative amounts count as zero.

        Args:
            direct_sales_amount: Sales made by the affiliate
            downline_sales_amount: Sales made by the affiliate's downline

        Returns:
            Points score

        Example:
            >>> PointsCalculator().points(Decimal("1000"), Decimal("401"))
            1201
        """
        direct = max(to_decimal(direct_sales_amount), Decimal("0"))
        downline = max(to_decimal(downline_sales_amount), Decimal("0"))

        raw = (
            direct * self.direct_weight + downline * self.downline_weight
        ) / self.sales_unit

        return int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def rollover(self, points: int) -> int:
        """
        Points carried into the next qualification period (rounded down).

        Example:
            >>> PointsCalculator().rollover(1001)
            500
        """
        if points <= 0:
            return 0
        carried = Decimal(points) * POINTS_ROLLOVER_RATE
        return int(carried.quantize(Decimal("1"), rounding=ROUND_DOWN))
