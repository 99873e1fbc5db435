import enum
import itertools
import time
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from pydantic import BaseModel, computed_field

from .order_item import OrderLineItem


class OrderStatusEnum(str, enum.Enum):
    active = "active"
    completed = "completed"
    cancelled = "cancelled"
    paid = "paid"


# заказы, которые идут в выручку и в среднее время обслуживания
SETTLED_STATUSES = (OrderStatusEnum.completed, OrderStatusEnum.paid)

_order_seq = itertools.count(1)


def new_order_id() -> str:
    """Уникальный id, упорядоченный по времени создания."""
    return f"ORDER_{time.time_ns()}_{next(_order_seq):04d}"


def sum_line_items(items: Iterable[OrderLineItem]) -> Decimal:
    return sum((item.line_total for item in items), Decimal("0"))


class Order(BaseModel):
    id: str
    table_id: str
    items: Tuple[OrderLineItem, ...] = ()
    start_time: datetime
    end_time: Optional[datetime] = None
    status: OrderStatusEnum = OrderStatusEnum.active
    waiter: Optional[str] = None
    payment_method: Optional[str] = None
    tse_signature: Optional[str] = None

    class Config:
        frozen = True

    @computed_field
    @property
    def total(self) -> Decimal:
        # всегда пересчитывается из позиций, отдельно не хранится
        return sum_line_items(self.items)

    @property
    def is_active(self) -> bool:
        return self.status == OrderStatusEnum.active
