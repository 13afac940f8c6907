"""
Shared fixtures for unit tests.

This module provides common fixtures used across multiple test modules:
- TierClassifier and PointsCalculator instances
- AffiliateNode builder
"""

from decimal import Decimal

import pytest

from compensation import AffiliateNode, AffiliateStatus, PointsCalculator, TierClassifier


@pytest.fixture
def classifier() -> TierClassifier:
    """Classifier over the default tier ladder."""
    return TierClassifier()


@pytest.fixture
def points_calc() -> PointsCalculator:
    """Points calculator with default weights."""
    return PointsCalculator()


@pytest.fixture
def node():
    """
    Build an AffiliateNode with sensible defaults.

    Returns:
        Callable taking id, sponsor_id and any other node field
    """
    def build(
        affiliate_id: int,
        sponsor_id: int | None = None,
        status: AffiliateStatus = AffiliateStatus.APPROVED,
        referrals: int = 0,
        direct_sales: str = "0",
        team_sales: str = "0",
    ) -> AffiliateNode:
        return AffiliateNode(
            id=affiliate_id,
            sponsor_id=sponsor_id,
            status=status,
            direct_referrals_count=referrals,
            direct_sales_volume=Decimal(direct_sales),
            team_sales_volume=Decimal(team_sales),
        )

    return build
