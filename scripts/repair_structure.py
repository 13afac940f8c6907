#!/usr/bin/env python3
"""
Repair affiliate structure.

Recounts direct referrals from sponsor links, re-derives tiers and prints
a health report. Sponsor cycles are reported, never changed.

Usage:
    python scripts/repair_structure.py
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger

from app.database import create_engine, create_session_maker
from app.services.affiliate import StructureMaintenanceService
from app.utils.logging import setup_logging


async def repair_structure() -> int:
    """Run the repair and return a process exit code."""
    engine = create_engine()
    session_maker = create_session_maker(engine)

    try:
        async with session_maker() as session:
            report = await StructureMaintenanceService(session).repair()
    finally:
        await engine.dispose()

    logger.info(f"Total affiliates:      {report.total_affiliates}")
    logger.info(f"With sponsor:          {report.with_sponsor}")
    logger.info(f"Orphans:               {report.orphans}")
    logger.info(f"Referral counts fixed: {report.referral_counts_fixed}")
    logger.info(f"Tiers changed:         {report.tiers_changed}")
    logger.info(f"Health:                {report.health_percent}%")

    if report.cycle_members:
        logger.error(f"Sponsor cycles involving: {report.cycle_members}")
        return 1

    logger.success("Structure repaired")
    return 0


if __name__ == "__main__":
    setup_logging()
    sys.exit(asyncio.run(repair_structure()))
