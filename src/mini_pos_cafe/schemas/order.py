from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from mini_pos_cafe.models import Order


class VATBreakdown(BaseModel):
    low_rate: Decimal
    high_rate: Decimal
    net_low: Decimal = Decimal("0")
    vat_low: Decimal = Decimal("0")
    net_high: Decimal = Decimal("0")
    vat_high: Decimal = Decimal("0")

    @property
    def net_total(self) -> Decimal:
        return self.net_low + self.net_high

    @property
    def vat_total(self) -> Decimal:
        return self.vat_low + self.vat_high


class KitchenTicket(BaseModel):
    table_id: str
    table_name: str
    order: Order


class LineItemAdd(BaseModel):
    menu_item_id: str


class LineItemUpdate(BaseModel):
    delta: Optional[int] = None
    notes: Optional[str] = None

    class Config:
        extra = "forbid"
