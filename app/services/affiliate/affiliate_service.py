"""
Affiliate service.

Enrollment, status management and tier refresh for affiliates.
"""

import secrets

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import (
    REFERRAL_CODE_ALPHABET,
    REFERRAL_CODE_LENGTH,
    REFERRAL_CODE_MAX_ATTEMPTS,
    REFERRAL_CODE_PREFIX,
)
from app.models.affiliate import Affiliate
from app.models.enums import AffiliateStatus, Tier
from app.repositories.affiliate_repository import AffiliateRepository
from app.services.affiliate.tier_sync import TierSynchronizer
from app.services.base_service import BaseService, transaction
from app.utils.datetime_utils import utc_now
from app.utils.exceptions import (
    AffiliateNotFoundError,
    EnrollmentError,
    InvalidTransitionError,
)
from compensation import TierClassification, TierClassifier, get_tier_config

# action -> (allowed source statuses, target status)
AFFILIATE_TRANSITIONS: dict[
    str, tuple[frozenset[AffiliateStatus], AffiliateStatus]
] = {
    "approve": (frozenset({AffiliateStatus.PENDING}), AffiliateStatus.APPROVED),
    "reject": (frozenset({AffiliateStatus.PENDING}), AffiliateStatus.REJECTED),
    "suspend": (frozenset({AffiliateStatus.APPROVED}), AffiliateStatus.SUSPENDED),
    "reinstate": (
        frozenset({AffiliateStatus.SUSPENDED}),
        AffiliateStatus.APPROVED,
    ),
}


def generate_referral_code() -> str:
    """Generate a random referral code, e.g. ``SKY-7KQ2MX``."""
    suffix = "".join(
        secrets.choice(REFERRAL_CODE_ALPHABET)
        for _ in range(REFERRAL_CODE_LENGTH)
    )
    return f"{REFERRAL_CODE_PREFIX}{suffix}"


class AffiliateService(BaseService):
    """Affiliate enrollment and status management."""

    def __init__(
        self,
        session: AsyncSession,
        classifier: TierClassifier | None = None,
    ) -> None:
        super().__init__(session)
        self.affiliate_repo = AffiliateRepository(session)
        self.tier_sync = TierSynchronizer(classifier)

    async def get(self, affiliate_id: int) -> Affiliate:
        """
        Get affiliate by ID.

        Raises:
            AffiliateNotFoundError: If the affiliate does not exist
        """
        affiliate = await self.affiliate_repo.get_by_id(affiliate_id)
        if affiliate is None:
            raise AffiliateNotFoundError(affiliate_id)
        return affiliate

    async def _unique_referral_code(self) -> str:
        for _ in range(REFERRAL_CODE_MAX_ATTEMPTS):
            code = generate_referral_code()
            if not await self.affiliate_repo.exists(referral_code=code):
                return code
        raise EnrollmentError("Could not generate a unique referral code")

    @transaction
    async def enroll(
        self, user_id: str, sponsor_code: str | None = None
    ) -> Affiliate:
        """
        Enroll a user as a pending bronze affiliate.

        Args:
            user_id: Host application user reference
            sponsor_code: Referral code of the recruiting affiliate

        Returns:
            Created affiliate

        Raises:
            EnrollmentError: If the user is already enrolled
            AffiliateNotFoundError: If the sponsor code is unknown
        """
        if await self.affiliate_repo.get_by_user_id(user_id):
            raise EnrollmentError(f"User {user_id} is already an affiliate")

        sponsor = None
        if sponsor_code:
            sponsor = await self.affiliate_repo.get_by_referral_code(sponsor_code)
            if sponsor is None:
                raise AffiliateNotFoundError(sponsor_code)

        bronze = get_tier_config(Tier.BRONZE)
        affiliate = await self.affiliate_repo.create(
            user_id=user_id,
            referral_code=await self._unique_referral_code(),
            sponsor_id=sponsor.id if sponsor else None,
            status=AffiliateStatus.PENDING.value,
            tier=bronze.tier.value,
            commission_rate=bronze.commission_rate,
        )

        if sponsor is not None:
            await self.affiliate_repo.increment_referrals(sponsor.id)

        self.logger.info(
            "Affiliate enrolled",
            extra={
                "affiliate_id": affiliate.id,
                "user_id": user_id,
                "referral_code": affiliate.referral_code,
                "sponsor_id": affiliate.sponsor_id,
            },
        )
        return affiliate

    async def _transition(self, affiliate_id: int, action: str) -> Affiliate:
        affiliate = await self.affiliate_repo.get_for_update(affiliate_id)
        if affiliate is None:
            raise AffiliateNotFoundError(affiliate_id)

        sources, target = AFFILIATE_TRANSITIONS[action]
        if AffiliateStatus(affiliate.status) not in sources:
            raise InvalidTransitionError(
                "affiliate", affiliate_id, action, affiliate.status
            )

        previous = affiliate.status
        affiliate.status = target.value
        if action == "approve":
            affiliate.approved_at = utc_now()
        await self.session.flush()

        self.logger.info(
            "Affiliate status changed",
            extra={
                "affiliate_id": affiliate_id,
                "action": action,
                "old_status": previous,
                "new_status": target.value,
            },
        )
        return affiliate

    @transaction
    async def approve(self, affiliate_id: int) -> Affiliate:
        """Approve a pending affiliate."""
        return await self._transition(affiliate_id, "approve")

    @transaction
    async def reject(self, affiliate_id: int) -> Affiliate:
        """Reject a pending affiliate."""
        return await self._transition(affiliate_id, "reject")

    @transaction
    async def suspend(self, affiliate_id: int) -> Affiliate:
        """Suspend an approved affiliate. Suspended affiliates earn nothing."""
        return await self._transition(affiliate_id, "suspend")

    @transaction
    async def reinstate(self, affiliate_id: int) -> Affiliate:
        """Return a suspended affiliate to approved."""
        return await self._transition(affiliate_id, "reinstate")

    @transaction
    async def refresh_tier(self, affiliate_id: int) -> TierClassification:
        """
        Re-derive points, tier and direct rate from current metrics.

        Raises:
            AffiliateNotFoundError: If the affiliate does not exist
        """
        affiliate = await self.affiliate_repo.get_for_update(affiliate_id)
        if affiliate is None:
            raise AffiliateNotFoundError(affiliate_id)

        classification, _ = self.tier_sync.sync(affiliate)
        await self.session.flush()
        return classification
