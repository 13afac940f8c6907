"""Tests for points calculation."""

from decimal import Decimal

import pytest

from compensation import PointsCalculator


class TestPointsCalculator:
    """Tests for PointsCalculator."""

    def test_direct_sales_full_weight(self, points_calc: PointsCalculator) -> None:
        """One point per currency unit sold directly."""
        assert points_calc.points(Decimal("1000"), Decimal("0")) == 1000

    def test_downline_sales_half_weight(self, points_calc: PointsCalculator) -> None:
        """Half a point per currency unit sold by the downline."""
        assert points_calc.points(Decimal("0"), Decimal("1000")) == 500

    def test_rounds_half_up(self, points_calc: PointsCalculator) -> None:
        """1000 + 200.5 rounds up to 1201."""
        assert points_calc.points(Decimal("1000"), Decimal("401")) == 1201
        assert points_calc.points(Decimal("0.5"), Decimal("0")) == 1
        assert points_calc.points(Decimal("0.4"), Decimal("0")) == 0

    def test_negative_amounts_count_as_zero(
        self, points_calc: PointsCalculator
    ) -> None:
        """Refund-driven negative volume never produces negative points."""
        assert points_calc.points(Decimal("-50"), Decimal("100")) == 50
        assert points_calc.points(Decimal("-50"), Decimal("-50")) == 0

    def test_accepts_plain_numbers(self, points_calc: PointsCalculator) -> None:
        """Ints and strings are converted to Decimal."""
        assert points_calc.points(200, "100") == 250

    def test_custom_sales_unit(self) -> None:
        """A sales unit of 10 gives one point per 10 currency units."""
        calc = PointsCalculator(sales_unit=Decimal("10"))
        assert calc.points(Decimal("1000"), Decimal("0")) == 100

    def test_sales_unit_must_be_positive(self) -> None:
        """Zero sales unit is rejected."""
        with pytest.raises(ValueError):
            PointsCalculator(sales_unit=Decimal("0"))

    @pytest.mark.parametrize(
        "points, carried",
        [(1001, 500), (1000, 500), (1, 0), (0, 0), (-3, 0)],
    )
    def test_rollover(
        self, points_calc: PointsCalculator, points: int, carried: int
    ) -> None:
        """Half the points carry over, rounded down."""
        assert points_calc.rollover(points) == carried
