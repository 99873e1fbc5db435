from .menu_item import ALL_CATEGORIES, MenuCategoryEnum, MenuItem
from .order_item import OrderLineItem
from .order import Order, OrderStatusEnum, SETTLED_STATUSES, new_order_id
from .table import Table, TableStatusEnum

__all__ = [
    "ALL_CATEGORIES",
    "MenuCategoryEnum",
    "MenuItem",
    "OrderLineItem",
    "Order",
    "OrderStatusEnum",
    "SETTLED_STATUSES",
    "new_order_id",
    "Table",
    "TableStatusEnum",
]
