"""
Affiliate compensation core.

Standalone package for tier classification, points and multi-level
commission planning. No database, ORM or settings dependencies.

Example:
    >>> from decimal import Decimal
    >>> from compensation import AffiliateNode, DistributionPlanner, HierarchyResolver
    >>>
    >>> resolver = HierarchyResolver([
    ...     AffiliateNode(id=1),
    ...     AffiliateNode(id=2, sponsor_id=1),
    ... ])
    >>> plan = DistributionPlanner().plan(resolver, 2, Decimal("1000"), "order-1")
    >>> [(s.affiliate_id, s.amount) for s in plan.shares]
    [(2, Decimal('100.00')), (1, Decimal('20.00'))]
"""

from compensation.constants import (
    MAX_COMMISSION_DEPTH,
    TIER_LADDER,
    UPLINE_SCAN_LIMIT,
    get_tier_config,
    normalize_tier,
)
from compensation.core.classifier import TierClassifier
from compensation.core.distribution import DistributionPlanner
from compensation.core.hierarchy import HierarchyResolver
from compensation.core.models import (
    AffiliateNode,
    CommissionShare,
    DistributionPlan,
    TierClassification,
    TierConfig,
)
from compensation.core.points import PointsCalculator
from compensation.exceptions import (
    CompensationError,
    CorruptHierarchyError,
    RateStackingError,
    UnknownAffiliateError,
)
from compensation.types import AffiliateStatus, CommissionType, Tier


__version__ = "1.0.0"
__all__ = [
    # Core
    "TierClassifier",
    "PointsCalculator",
    "HierarchyResolver",
    "DistributionPlanner",
    # Models
    "AffiliateNode",
    "CommissionShare",
    "DistributionPlan",
    "TierClassification",
    "TierConfig",
    # Types
    "AffiliateStatus",
    "CommissionType",
    "Tier",
    # Constants
    "MAX_COMMISSION_DEPTH",
    "TIER_LADDER",
    "UPLINE_SCAN_LIMIT",
    "get_tier_config",
    "normalize_tier",
    # Errors
    "CompensationError",
    "CorruptHierarchyError",
    "RateStackingError",
    "UnknownAffiliateError",
]
