"""
Domain enumerations for the compensation engine.

Values are stored as plain strings by the persistence layer, so every enum
derives from ``str`` and compares equal to its raw value.
"""

from enum import Enum


class Tier(str, Enum):
    """Affiliate performance tiers, lowest first."""

    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    DIAMOND = "diamond"


class AffiliateStatus(str, Enum):
    """Affiliate program membership status."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SUSPENDED = "suspended"


class CommissionType(str, Enum):
    """Commission kind, derived from the commission level."""

    DIRECT = "direct"
    MLM_LEVEL1 = "mlm_level1"
    MLM_LEVEL2 = "mlm_level2"

    @classmethod
    def for_level(cls, level: int) -> "CommissionType":
        """
        Get commission type for an upline level.

        Args:
            level: Commission level (0 = seller)

        Returns:
            Matching CommissionType

        Raises:
            ValueError: If no type is defined for the level
        """
        if level == 0:
            return cls.DIRECT
        return cls(f"mlm_level{level}")
