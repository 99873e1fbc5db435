import logging
from decimal import Decimal
from typing import Optional

from mini_pos_cafe.models import MenuItem, Order, OrderLineItem
from mini_pos_cafe.models.order import sum_line_items

logger = logging.getLogger(__name__)


def compute_total(order: Order) -> Decimal:
    """
    Сумма заказа: Σ(quantity * price) по текущим позициям.
    Единственный источник правды для order.total.
    """
    return sum_line_items(order.items)


def _editable(order: Order, index: Optional[int] = None) -> bool:
    if not order.is_active:
        logger.debug("Order %s is %s, items are frozen", order.id, order.status.value)
        return False
    if index is not None and not 0 <= index < len(order.items):
        logger.debug("Order %s has no line #%s", order.id, index)
        return False
    return True


def add_line_item(order: Order, menu_item: MenuItem) -> Order:
    """
    Добавляет позицию меню в заказ.
    Если такая позиция уже есть, увеличивает её количество на 1,
    иначе дописывает новую строку (снимок позиции меню) в конец.
    """
    if not _editable(order):
        return order

    items = list(order.items)
    for i, line in enumerate(items):
        if line.id == menu_item.id:
            items[i] = line.model_copy(update={"quantity": line.quantity + 1})
            break
    else:
        items.append(OrderLineItem.from_menu_item(menu_item))

    return order.model_copy(update={"items": tuple(items)})


def change_quantity(order: Order, index: int, delta: int) -> Order:
    """
    Меняет количество строки на delta.
    Строка с количеством <= 0 удаляется целиком, а не обнуляется.
    Индекс вне диапазона — заказ не меняется.
    """
    if not _editable(order, index):
        return order

    items = list(order.items)
    quantity = items[index].quantity + delta
    if quantity <= 0:
        del items[index]
    else:
        items[index] = items[index].model_copy(update={"quantity": quantity})

    return order.model_copy(update={"items": tuple(items)})


def remove_line_item(order: Order, index: int) -> Order:
    """
    Удаляет строку заказа безусловно.
    """
    if not _editable(order, index):
        return order

    items = list(order.items)
    del items[index]
    return order.model_copy(update={"items": tuple(items)})


def set_line_notes(order: Order, index: int, notes: Optional[str]) -> Order:
    """
    Комментарий к строке (например, "без газа"). Пустая строка сбрасывает его.
    """
    if not _editable(order, index):
        return order

    items = list(order.items)
    items[index] = items[index].model_copy(update={"notes": notes or None})
    return order.model_copy(update={"items": tuple(items)})
