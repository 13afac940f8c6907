"""
Services.

Business logic layer.
"""

# Base Service Infrastructure
from app.services.base_service import (
    BaseService,
    log_operation,
    transaction,
)

# Affiliate Services
from app.services.affiliate import (
    AffiliateService,
    StructureMaintenanceService,
    StructureReport,
    TierSynchronizer,
)

# Commission Services
from app.services.commission import CommissionEngine, SaleEvent

# Payout Services
from app.services.payout import PayoutLedger

# Reporting
from app.services.reporting import CompensationStatistics


__all__ = [
    # Base
    "BaseService",
    "log_operation",
    "transaction",
    # Affiliate
    "AffiliateService",
    "StructureMaintenanceService",
    "StructureReport",
    "TierSynchronizer",
    # Commission
    "CommissionEngine",
    "SaleEvent",
    # Payout
    "PayoutLedger",
    # Reporting
    "CompensationStatistics",
]
