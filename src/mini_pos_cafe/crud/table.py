import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from mini_pos_cafe.config import settings
from mini_pos_cafe.models import Order, OrderStatusEnum, Table, TableStatusEnum, new_order_id
from mini_pos_cafe.schemas.order import KitchenTicket

logger = logging.getLogger(__name__)

Tables = Tuple[Table, ...]


class TableOccupiedError(ValueError):
    """Новый заказ на столе, у которого уже есть активный (политика reject)."""

    def __init__(self, table_id: str, order_id: str):
        super().__init__(f"Table {table_id} already has active order {order_id}")
        self.table_id = table_id
        self.order_id = order_id


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_table(tables: Tables, table_id: Optional[str]) -> Optional[Table]:
    return next((t for t in tables if t.id == table_id), None)


def get_current_order(table: Optional[Table]) -> Optional[Order]:
    """
    Текущий активный заказ стола или None.
    """
    if table is None or not table.current_order_id:
        return None
    return next((o for o in table.order_history if o.id == table.current_order_id), None)


def _replace(tables: Tables, table: Table) -> Tables:
    return tuple(table if t.id == table.id else t for t in tables)


def _replace_order(table: Table, order: Order) -> Tuple[Order, ...]:
    return tuple(order if o.id == order.id else o for o in table.order_history)


def start_new_order(
    tables: Tables,
    table_id: str,
    guests: int,
    waiter: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
    order_id: Optional[str] = None,
    policy: Optional[str] = None,
) -> Tables:
    """
    Открывает новый заказ на столе.

    - создаёт Order в статусе active с пустым списком позиций
    - добавляет его в историю стола, стол -> occupied
    - проставляет гостей, официанта и ссылку на текущий заказ

    Если у стола уже есть активный заказ, поведение задаёт политика
    (settings.OCCUPIED_TABLE_POLICY):
    - "overwrite": прежний заказ закрывается как cancelled, новый становится текущим
    - "reject": TableOccupiedError

    Неизвестный table_id или guests < 0 — состояние не меняется.
    """
    table = get_table(tables, table_id)
    if table is None:
        logger.debug("start_new_order: unknown table %s", table_id)
        return tables
    if guests < 0:
        logger.debug("start_new_order: negative guest count %s for table %s", guests, table_id)
        return tables

    now = now or _utcnow()
    policy = policy or settings.OCCUPIED_TABLE_POLICY
    history = table.order_history

    previous = get_current_order(table)
    if previous is not None:
        if policy == "reject":
            raise TableOccupiedError(table.id, previous.id)
        logger.warning(
            "Table %s already has active order %s, cancelling it", table.id, previous.id
        )
        cancelled = previous.model_copy(
            update={"status": OrderStatusEnum.cancelled, "end_time": now}
        )
        history = _replace_order(table, cancelled)

    order = Order(
        id=order_id or new_order_id(),
        table_id=table.id,
        start_time=now,
        waiter=waiter,
    )
    updated = table.model_copy(
        update={
            "status": TableStatusEnum.occupied,
            "guests": guests,
            "waiter": waiter,
            "current_order_id": order.id,
            "order_history": history + (order,),
        }
    )
    logger.info("Started order %s on table %s (%d guests)", order.id, table.id, guests)
    return _replace(tables, updated)


def complete_order(
    tables: Tables,
    table_id: str,
    payment_method: str,
    tse_signature: str,
    *,
    now: Optional[datetime] = None,
) -> Tables:
    """
    Оплата текущего заказа: заказ -> paid (время закрытия, способ оплаты,
    TSE-подпись), у стола сбрасывается текущий заказ, стол -> cleaning.

    Если активного заказа нет — ничего не делает и не падает.
    """
    table = get_table(tables, table_id)
    order = get_current_order(table)
    if order is None or not order.is_active:
        logger.debug("complete_order: table %s has no active order", table_id)
        return tables

    paid = order.model_copy(
        update={
            "status": OrderStatusEnum.paid,
            "end_time": now or _utcnow(),
            "payment_method": payment_method,
            "tse_signature": tse_signature,
        }
    )
    updated = table.model_copy(
        update={
            "status": TableStatusEnum.cleaning,
            "current_order_id": None,
            "order_history": _replace_order(table, paid),
        }
    )
    logger.info(
        "Order %s on table %s paid by %s, total %s",
        paid.id, table.id, payment_method, paid.total,
    )
    return _replace(tables, updated)


def free_table(tables: Tables, table_id: str) -> Tables:
    """
    Освобождает стол после уборки: free, 0 гостей, без официанта.
    Допустимо из любого статуса.
    """
    table = get_table(tables, table_id)
    if table is None:
        logger.debug("free_table: unknown table %s", table_id)
        return tables

    update = {"status": TableStatusEnum.free, "guests": 0, "waiter": None}
    order = get_current_order(table)
    if order is not None:
        # стол без статуса occupied не может ссылаться на заказ
        update["current_order_id"] = None
        update["order_history"] = _replace_order(
            table,
            order.model_copy(update={"status": OrderStatusEnum.cancelled, "end_time": _utcnow()}),
        )
        logger.warning("Freeing table %s cancelled its active order %s", table.id, order.id)

    return _replace(tables, table.model_copy(update=update))


def update_current_order(
    tables: Tables,
    table_id: Optional[str],
    fn: Callable[[Order], Order],
) -> Tables:
    """
    Применяет операцию над позициями (crud.order) к текущему заказу стола.
    Нет стола или активного заказа — состояние не меняется.
    """
    table = get_table(tables, table_id)
    order = get_current_order(table)
    if order is None:
        return tables

    updated_order = fn(order)
    if updated_order is order:
        return tables
    return _replace(
        tables, table.model_copy(update={"order_history": _replace_order(table, updated_order)})
    )


def kitchen_tickets(tables: Tables) -> List[KitchenTicket]:
    """
    Активные заказы с позициями для кухни, старые первыми.
    """
    tickets = []
    for table in tables:
        order = get_current_order(table)
        if order is not None and order.items:
            tickets.append(KitchenTicket(table_id=table.id, table_name=table.name, order=order))
    return sorted(tickets, key=lambda t: t.order.start_time)
