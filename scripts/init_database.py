#!/usr/bin/env python3
"""
Create compensation tables and optionally seed the network root.

Usage:
    python scripts/init_database.py
    python scripts/init_database.py --root-user admin-001
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger

from app.database import create_engine, create_session_maker
from app.models import Base
from app.services.affiliate import AffiliateService
from app.utils.logging import setup_logging


async def init_database(root_user: str | None = None) -> None:
    """
    Create affiliate, commission and withdrawal tables.

    Args:
        root_user: Host user to enroll and approve as the first affiliate,
            skipped if already enrolled
    """
    engine = create_engine(echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    logger.info(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")

    try:
        if root_user:
            session_maker = create_session_maker(engine)
            async with session_maker() as session:
                service = AffiliateService(session)
                existing = await service.affiliate_repo.get_by_user_id(root_user)
                if existing:
                    logger.info(
                        f"Root user {root_user} already enrolled "
                        f"({existing.referral_code})"
                    )
                else:
                    root = await service.enroll(root_user)
                    await service.approve(root.id)
                    logger.success(
                        f"Root affiliate {root.id} created, "
                        f"referral code {root.referral_code}"
                    )
    finally:
        await engine.dispose()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Initialize compensation database")
    parser.add_argument(
        "--root-user",
        type=str,
        default=None,
        help="Enroll and approve this user as the network root",
    )
    args = parser.parse_args()

    setup_logging()
    asyncio.run(init_database(root_user=args.root_user))


if __name__ == "__main__":
    main()
