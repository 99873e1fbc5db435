import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from mini_pos_cafe.config import Settings, settings as default_settings
from mini_pos_cafe.crud import order as order_crud
from mini_pos_cafe.crud import table as table_crud
from mini_pos_cafe.crud.stats import get_order_duration, get_table_stats
from mini_pos_cafe.crud.vat import calculate_vat_breakdown
from mini_pos_cafe.models import ALL_CATEGORIES, MenuItem, OrderLineItem, Table, TableStatusEnum
from mini_pos_cafe.schemas.order import KitchenTicket, VATBreakdown
from mini_pos_cafe.schemas.table import POSSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionState:
    """Фокус оператора: выбранный стол, категория меню и поиск."""

    current_table_id: Optional[str] = None
    # заказ, который был активен у стола в момент выбора
    current_order_id: Optional[str] = None
    selected_category: str = ALL_CATEGORIES
    search_term: str = ""
    processing_payment: bool = False


def sync_session(session: SessionState, tables: Sequence[Table]) -> SessionState:
    """
    Согласует фокус с реестром столов. Вызывается после каждой мутации реестра.

    Фокус сбрасывается, если стол исчез, ушёл на уборку или его заказ,
    на котором стоял фокус, больше не текущий (оплачен или отменён).
    """
    if session.current_table_id is None:
        return session

    table = table_crud.get_table(tables, session.current_table_id)
    stale = (
        table is None
        or table.status == TableStatusEnum.cleaning
        or (session.current_order_id is not None and table.current_order_id != session.current_order_id)
    )
    if stale:
        logger.debug("Dropping focus from table %s", session.current_table_id)
        return replace(session, current_table_id=None, current_order_id=None)

    if session.current_order_id != table.current_order_id:
        return replace(session, current_order_id=table.current_order_id)
    return session


def filter_menu(
    menu_items: Iterable[MenuItem],
    category: str = ALL_CATEGORIES,
    search_term: str = "",
) -> List[MenuItem]:
    """
    Фильтр меню по категории и строке поиска (по названию или категории,
    без учёта регистра).
    """
    items = [
        item for item in menu_items
        if category == ALL_CATEGORIES or item.category.value == category
    ]
    term = search_term.strip().lower()
    if term:
        items = [
            item for item in items
            if term in item.name.lower() or term in item.category.value.lower()
        ]
    return items


class POSStore:
    """
    In-memory состояние кассы: столы (с историей заказов), меню и сессия оператора.

    Все изменения идут через методы-интенты; каждый возвращает новый POSSnapshot.
    Однопоточная модель: интент выполняется целиком до следующего.
    """

    def __init__(
        self,
        menu_items: Iterable[MenuItem] = (),
        tables: Iterable[Table] = (),
        config: Optional[Settings] = None,
    ) -> None:
        self.config = config or default_settings
        self.menu_items: tuple = tuple(menu_items)
        self.tables: tuple = tuple(tables)
        self.session = SessionState(selected_category=self.config.DEFAULT_CATEGORY)

        # при старте фокус на первом занятом столе
        first_occupied = next(
            (t for t in self.tables if t.status == TableStatusEnum.occupied), None
        )
        if first_occupied is not None:
            self.session = replace(
                self.session,
                current_table_id=first_occupied.id,
                current_order_id=first_occupied.current_order_id,
            )

    # -------------------- чтение --------------------

    @property
    def current_table(self) -> Optional[Table]:
        return table_crud.get_table(self.tables, self.session.current_table_id)

    def snapshot(self) -> POSSnapshot:
        current_table = self.current_table
        return POSSnapshot(
            tables=list(self.tables),
            menu_items=filter_menu(
                self.menu_items, self.session.selected_category, self.session.search_term
            ),
            current_table=current_table,
            current_order=table_crud.get_current_order(current_table),
            selected_category=self.session.selected_category,
            search_term=self.session.search_term,
            processing_payment=self.session.processing_payment,
            table_stats=get_table_stats(self.tables),
        )

    def get_menu_item(self, menu_item_id: str) -> Optional[MenuItem]:
        return next((m for m in self.menu_items if m.id == menu_item_id), None)

    def kitchen_tickets(self) -> List[KitchenTicket]:
        return table_crud.kitchen_tickets(self.tables)

    def get_order_duration(self, start_time: datetime) -> str:
        return get_order_duration(start_time)

    def calculate_vat_breakdown(self, items: Iterable[OrderLineItem]) -> VATBreakdown:
        return calculate_vat_breakdown(
            items, (self.config.VAT_RATE_LOW, self.config.VAT_RATE_HIGH)
        )

    # -------------------- интенты реестра столов --------------------

    def _commit(self, tables: tuple) -> POSSnapshot:
        self.tables = tables
        self.session = sync_session(self.session, self.tables)
        return self.snapshot()

    def select_table(self, table_id: Optional[str]) -> POSSnapshot:
        """
        Фокус на стол (None — снять). Сам стол не меняется.
        Стол на уборке выбрать нельзя: фокус снимается.
        """
        table = table_crud.get_table(self.tables, table_id)
        if table is None or table.status == TableStatusEnum.cleaning:
            self.session = replace(self.session, current_table_id=None, current_order_id=None)
        else:
            self.session = replace(
                self.session, current_table_id=table.id, current_order_id=table.current_order_id
            )
        return self.snapshot()

    def start_new_order(self, table_id: str, guests: int, waiter: Optional[str] = None) -> POSSnapshot:
        tables = table_crud.start_new_order(
            self.tables, table_id, guests, waiter, policy=self.config.OCCUPIED_TABLE_POLICY
        )
        table = table_crud.get_table(tables, table_id)
        if table is not None and table_id == self.session.current_table_id:
            # новый заказ на выбранном столе: фокус переходит на него
            self.session = replace(self.session, current_order_id=table.current_order_id)
        return self._commit(tables)

    def complete_order(self, table_id: str, payment_method: str, tse_signature: str) -> POSSnapshot:
        return self._commit(
            table_crud.complete_order(self.tables, table_id, payment_method, tse_signature)
        )

    def free_table(self, table_id: str) -> POSSnapshot:
        return self._commit(table_crud.free_table(self.tables, table_id))

    async def process_payment(self, payment_method: str, tse_signature: str) -> POSSnapshot:
        """
        Оплата заказа выбранного стола с имитацией задержки терминала.
        Заказ закрывается сразу, индикатор processing_payment гаснет
        после PAYMENT_PROCESSING_DELAY_SECONDS. Отмены нет.
        """
        table = self.current_table
        if table_crud.get_current_order(table) is None:
            return self.snapshot()

        self.session = replace(self.session, processing_payment=True)
        self.complete_order(table.id, payment_method, tse_signature)
        try:
            await asyncio.sleep(self.config.PAYMENT_PROCESSING_DELAY_SECONDS)
        finally:
            self.session = replace(self.session, processing_payment=False)
        return self.snapshot()

    # -------------------- интенты заказа выбранного стола --------------------

    def _update_order(self, fn) -> POSSnapshot:
        return self._commit(
            table_crud.update_current_order(self.tables, self.session.current_table_id, fn)
        )

    def add_to_order(self, menu_item_id: str) -> POSSnapshot:
        """
        Добавляет позицию в заказ выбранного стола.
        На свободном столе заказ открывается автоматически (1 гость).
        """
        menu_item = self.get_menu_item(menu_item_id)
        table = self.current_table
        if menu_item is None or table is None:
            return self.snapshot()

        if table.current_order_id is None:
            if table.status != TableStatusEnum.free:
                return self.snapshot()
            self.start_new_order(table.id, 1, self.config.AUTO_ASSIGNED_WAITER)

        return self._update_order(lambda order: order_crud.add_line_item(order, menu_item))

    def update_quantity(self, index: int, delta: int) -> POSSnapshot:
        return self._update_order(lambda order: order_crud.change_quantity(order, index, delta))

    def remove_item(self, index: int) -> POSSnapshot:
        return self._update_order(lambda order: order_crud.remove_line_item(order, index))

    def set_item_notes(self, index: int, notes: Optional[str]) -> POSSnapshot:
        return self._update_order(lambda order: order_crud.set_line_notes(order, index, notes))

    # -------------------- фильтры меню --------------------

    def set_selected_category(self, category: str) -> POSSnapshot:
        self.session = replace(self.session, selected_category=category)
        return self.snapshot()

    def set_search_term(self, search_term: str) -> POSSnapshot:
        self.session = replace(self.session, search_term=search_term)
        return self.snapshot()


# Хранилище процесса: одно на приложение, создаётся при старте
_store: Optional[POSStore] = None


def init_store(menu_items: Iterable[MenuItem] = (), tables: Iterable[Table] = ()) -> POSStore:
    global _store
    _store = POSStore(menu_items, tables)
    logger.info("POS store ready: %d tables, %d menu items", len(_store.tables), len(_store.menu_items))
    return _store


def get_store() -> POSStore:
    if _store is None:
        return init_store()
    return _store
