from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from .menu_item import MenuCategoryEnum, MenuItem


class OrderLineItem(BaseModel):
    id: str  # id позиции меню
    name: str
    price: Decimal = Field(ge=0)  # фиксируется на момент заказа
    vat: Decimal = Field(ge=0)
    quantity: int = Field(default=1, ge=1)
    icon: str = ""
    category: Optional[MenuCategoryEnum] = None
    notes: Optional[str] = None

    class Config:
        frozen = True

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    @classmethod
    def from_menu_item(cls, menu_item: MenuItem) -> "OrderLineItem":
        """
        Снимок позиции меню: последующие правки каталога
        не меняют уже сделанные заказы.
        """
        return cls(
            id=menu_item.id,
            name=menu_item.name,
            price=menu_item.price,
            vat=menu_item.vat,
            icon=menu_item.icon,
            category=menu_item.category,
            quantity=1,
        )
