"""
Inbound sale event.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from compensation.utils.money import round_money


class SaleEvent(BaseModel):
    """A completed, paid order that may earn commissions."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    order_id: str = Field(min_length=1, max_length=100)
    order_total: Decimal = Field(ge=0)
    selling_affiliate_id: int

    @field_validator("order_total")
    @classmethod
    def round_order_total(cls, v: Decimal) -> Decimal:
        """Round to the currency's minor unit."""
        return round_money(v)
