"""
Compensation engine exceptions.

Every error raised by the engine derives from CompensationError so callers
can handle the whole family in one place.
"""

from decimal import Decimal


class CompensationError(Exception):
    """Base class for compensation engine errors."""


class UnknownAffiliateError(CompensationError):
    """Raised when an affiliate id is absent from the working set."""

    def __init__(self, affiliate_id: int) -> None:
        self.affiliate_id = affiliate_id
        super().__init__(f"Affiliate {affiliate_id} not found")


class CorruptHierarchyError(CompensationError):
    """Raised when sponsor links form a cycle or point at a missing affiliate."""

    def __init__(
        self, affiliate_id: int, chain: list[int], reason: str = "cycle"
    ) -> None:
        self.affiliate_id = affiliate_id
        self.chain = chain
        self.reason = reason
        path = " -> ".join(str(i) for i in [affiliate_id, *chain])
        super().__init__(
            f"Corrupt sponsor hierarchy ({reason}) for affiliate "
            f"{affiliate_id}: {path}"
        )


class RateStackingError(CompensationError):
    """Raised when planned commissions would exceed the order total."""

    def __init__(
        self, order_id: str, total: Decimal, order_total: Decimal
    ) -> None:
        self.order_id = order_id
        self.total = total
        self.order_total = order_total
        super().__init__(
            f"Commission total {total} exceeds order total {order_total} "
            f"for order {order_id}"
        )
