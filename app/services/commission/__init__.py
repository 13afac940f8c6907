"""
Commission services package.
"""

from app.services.commission.engine import CommissionEngine
from app.services.commission.events import SaleEvent


__all__ = [
    "CommissionEngine",
    "SaleEvent",
]
