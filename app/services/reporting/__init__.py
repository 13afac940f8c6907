"""
Reporting services package.
"""

from app.services.reporting.statistics import CompensationStatistics


__all__ = ["CompensationStatistics"]
