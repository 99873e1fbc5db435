import enum
from typing import Optional, Tuple

from pydantic import BaseModel, Field, model_validator

from .order import Order, OrderStatusEnum


class TableStatusEnum(str, enum.Enum):
    free = "free"
    occupied = "occupied"
    cleaning = "cleaning"
    reserved = "reserved"


class Table(BaseModel):
    id: str
    name: str
    status: TableStatusEnum = TableStatusEnum.free
    guests: int = Field(default=0, ge=0)
    location: str = ""
    waiter: Optional[str] = None
    current_order_id: Optional[str] = None
    order_history: Tuple[Order, ...] = ()

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_current_order(self) -> "Table":
        """
        Проверка входных данных (сид/каталог): ссылка на текущий заказ есть
        только у занятого стола и указывает на его единственный активный заказ.
        """
        active = [o for o in self.order_history if o.status == OrderStatusEnum.active]
        if len(active) > 1:
            raise ValueError(f"Table {self.id} has more than one active order")
        if self.current_order_id is None:
            if active:
                raise ValueError(f"Table {self.id} has an active order but no current_order_id")
            return self
        if self.status != TableStatusEnum.occupied:
            raise ValueError(f"Table {self.id} is {self.status.value} but references an order")
        if not active or active[0].id != self.current_order_id:
            raise ValueError(
                f"Table {self.id}: current_order_id={self.current_order_id} is not its active order"
            )
        return self
