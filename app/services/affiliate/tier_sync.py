"""
Tier synchronization.

Writes the classifier's verdict (tier, direct rate, points) back onto an
affiliate row.
"""

from typing import Any

from loguru import logger

from compensation import TierClassification, TierClassifier


class TierSynchronizer:
    """Keeps stored tier, commission rate and points in line with metrics."""

    def __init__(self, classifier: TierClassifier | None = None) -> None:
        self.classifier = classifier or TierClassifier()

    def sync(self, affiliate: Any) -> tuple[TierClassification, bool]:
        """
        Re-derive and store tier, rate and points.

        Args:
            affiliate: Affiliate ORM row (modified in place, not flushed)

        Returns:
            Tuple of (classification, tier_changed)
        """
        classification = self.classifier.classify_affiliate(affiliate)
        previous = affiliate.tier
        changed = previous != classification.tier.value

        affiliate.tier = classification.tier.value
        affiliate.commission_rate = classification.rate
        affiliate.points = self.classifier.points_for(affiliate)

        if changed:
            logger.info(
                "Affiliate tier changed",
                extra={
                    "affiliate_id": affiliate.id,
                    "old_tier": previous,
                    "new_tier": classification.tier.value,
                    "commission_rate": str(classification.rate),
                },
            )

        return classification, changed
