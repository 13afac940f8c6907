"""
Affiliate services package.

- affiliate_service: enrollment and status management
- maintenance: structure repair and health report
- tier_sync: writes classifier results back onto affiliate rows
"""

from app.services.affiliate.affiliate_service import (
    AFFILIATE_TRANSITIONS,
    AffiliateService,
    generate_referral_code,
)
from app.services.affiliate.maintenance import (
    StructureMaintenanceService,
    StructureReport,
)
from app.services.affiliate.tier_sync import TierSynchronizer


__all__ = [
    "AFFILIATE_TRANSITIONS",
    "AffiliateService",
    "StructureMaintenanceService",
    "StructureReport",
    "TierSynchronizer",
    "generate_referral_code",
]
