from decimal import Decimal

import pytest

from mini_pos_cafe.config import Settings
from mini_pos_cafe.crud.table import TableOccupiedError, get_table
from mini_pos_cafe.db.session import POSStore, SessionState, filter_menu, sync_session
from mini_pos_cafe.models import OrderStatusEnum, TableStatusEnum


def test_scenario_happy_path(store, item_a):
    snap = store.select_table("T1")
    assert snap.current_table.status == TableStatusEnum.free

    snap = store.start_new_order("T1", 2)
    assert snap.current_table.status == TableStatusEnum.occupied
    assert snap.current_table.guests == 2
    assert snap.current_order.status == OrderStatusEnum.active
    assert snap.current_order.total == 0

    store.add_to_order(item_a.id)
    snap = store.add_to_order(item_a.id)
    assert snap.current_order.total == Decimal("20.00")
    assert len(snap.current_order.items) == 1
    assert snap.current_order.items[0].quantity == 2

    snap = store.update_quantity(0, -1)
    assert snap.current_order.items[0].quantity == 1
    assert snap.current_order.total == Decimal("10.00")

    order_id = snap.current_order.id
    snap = store.complete_order("T1", "cash", "SIG1")
    table = get_table(snap.tables, "T1")
    order = table.order_history[-1]
    assert order.id == order_id
    assert order.status == OrderStatusEnum.paid
    assert table.status == TableStatusEnum.cleaning
    assert table.current_order_id is None
    # фокус не держит оплаченный заказ
    assert snap.current_table is None
    assert snap.current_order is None

    snap = store.free_table("T1")
    table = get_table(snap.tables, "T1")
    assert table.status == TableStatusEnum.free
    assert table.guests == 0
    assert snap.table_stats.revenue_today == Decimal("10.00")


def test_snapshots_are_independent(store, item_a):
    store.select_table("T1")
    before = store.start_new_order("T1", 2)
    after = store.add_to_order(item_a.id)

    assert before.current_order.items == ()
    assert after.current_order.total == Decimal("10.00")


def test_initial_focus_on_first_occupied_table(menu, tables, test_settings):
    assert POSStore(menu, tables, test_settings).snapshot().current_table is None

    occupied = POSStore(menu, tables, test_settings)
    occupied.start_new_order("T2", 3)
    restarted = POSStore(menu, occupied.tables, test_settings)
    assert restarted.snapshot().current_table.id == "T2"
    assert restarted.snapshot().current_order is not None


def test_add_to_free_focused_table_starts_order(store, water):
    store.select_table("T2")
    snap = store.add_to_order(water.id)

    assert snap.current_table.status == TableStatusEnum.occupied
    assert snap.current_table.guests == 1
    assert snap.current_table.waiter == store.config.AUTO_ASSIGNED_WAITER
    assert snap.current_order.total == Decimal("3.50")


def test_add_without_focus_or_unknown_item_is_noop(store, item_a):
    before = store.tables
    store.add_to_order(item_a.id)
    store.select_table("T1")
    store.add_to_order("UNKNOWN")
    assert store.tables == before


def test_add_to_cleaning_table_is_noop(store, item_a):
    store.select_table("T1")
    store.start_new_order("T1", 2)
    store.complete_order("T1", "cash", "S")
    before = store.tables

    # стол на уборке выбрать нельзя
    assert store.select_table("T1").current_table is None
    store.add_to_order(item_a.id)
    assert store.tables == before


def test_line_intents_without_active_order_are_noop(store):
    store.select_table("T1")
    before = store.tables
    store.update_quantity(0, 1)
    store.remove_item(0)
    store.set_item_notes(0, "x")
    assert store.tables is before


def test_remove_and_notes(store, item_a, water):
    store.select_table("T1")
    store.add_to_order(item_a.id)
    store.add_to_order(water.id)
    snap = store.set_item_notes(1, "No gas")
    assert snap.current_order.items[1].notes == "No gas"

    snap = store.remove_item(0)
    assert [i.id for i in snap.current_order.items] == [water.id]
    assert snap.current_order.total == Decimal("3.50")


def test_completing_other_table_keeps_focus(store, item_a):
    store.start_new_order("T2", 2)
    store.select_table("T1")
    store.add_to_order(item_a.id)

    snap = store.complete_order("T2", "card", "S")
    assert snap.current_table.id == "T1"
    assert snap.current_order is not None


def test_restart_order_on_focused_table_follows_new_order(store):
    store.select_table("T1")
    first = store.start_new_order("T1", 2).current_order
    second = store.start_new_order("T1", 4).current_order

    assert second.id != first.id
    assert store.snapshot().current_order.id == second.id


def test_reject_policy_surfaces_error(menu, tables):
    store = POSStore(menu, tables, Settings(OCCUPIED_TABLE_POLICY="reject"))
    store.start_new_order("T1", 2)
    with pytest.raises(TableOccupiedError):
        store.start_new_order("T1", 3)


def test_select_unknown_table_clears_focus(store):
    store.select_table("T1")
    assert store.select_table("NOPE").current_table is None
    assert store.select_table(None).current_table is None


def test_sync_session_drops_vanished_table(tables):
    session = SessionState(current_table_id="GONE")
    assert sync_session(session, tables).current_table_id is None


def test_sync_session_without_focus_is_identity(tables):
    session = SessionState()
    assert sync_session(session, tables) is session


def test_category_and_search_filters(store):
    snap = store.set_selected_category("Drinks")
    assert [m.id for m in snap.menu_items] == ["DRINK_WATER"]
    assert snap.selected_category == "Drinks"

    store.set_selected_category("All")
    snap = store.set_search_term("cake")
    assert [m.id for m in snap.menu_items] == ["DESSERT_CAKE"]


def test_filter_menu_matches_category_text(menu):
    assert [m.id for m in filter_menu(menu, "All", "dess")] == ["DESSERT_CAKE"]
    assert filter_menu(menu, "Appetizers") == []
    assert len(filter_menu(menu)) == 3


def test_vat_breakdown_uses_configured_rates(menu, tables):
    store = POSStore(menu, tables, Settings(VAT_RATE_LOW=Decimal("7"), VAT_RATE_HIGH=Decimal("19")))
    store.select_table("T1")
    store.add_to_order("DRINK_WATER")
    snap = store.add_to_order("ITEM_A")

    breakdown = store.calculate_vat_breakdown(snap.current_order.items)
    assert breakdown.net_low + breakdown.vat_low == Decimal("3.50")
    assert breakdown.net_high + breakdown.vat_high == Decimal("10.00")


async def test_process_payment(store, item_a):
    store.select_table("T1")
    store.add_to_order(item_a.id)

    snap = await store.process_payment("card", "TSE_1")
    table = get_table(snap.tables, "T1")
    assert table.status == TableStatusEnum.cleaning
    assert table.order_history[-1].payment_method == "card"
    assert snap.processing_payment is False
    assert snap.current_table is None


async def test_process_payment_without_focus_is_noop(store):
    before = store.tables
    snap = await store.process_payment("cash", "TSE")
    assert store.tables is before
    assert snap.processing_payment is False


def test_cleaning_table_loses_focus_on_next_mutation(store, tables):
    cleaning = get_table(tables, "T1").model_copy(update={"status": TableStatusEnum.cleaning})
    tables = tuple(cleaning if t.id == "T1" else t for t in tables)

    assert sync_session(SessionState(current_table_id="T1"), tables).current_table_id is None

    store.tables = tables
    store.session = SessionState(current_table_id="T1")
    snap = store.free_table("T2")
    assert snap.current_table is None


def test_negative_guests_leave_table_unchanged(store):
    store.select_table("T1")
    before = store.tables

    snap = store.start_new_order("T1", -3)
    table = get_table(snap.tables, "T1")
    assert store.tables is before
    assert table.guests == 0
    assert table.status == TableStatusEnum.free
    assert snap.current_order is None


async def test_process_payment_without_active_order_skips_delay(store, monkeypatch):
    calls = []

    async def fake_sleep(delay):
        calls.append(delay)

    monkeypatch.setattr("mini_pos_cafe.db.session.asyncio.sleep", fake_sleep)
    store.select_table("T1")
    before = store.tables

    snap = await store.process_payment("cash", "TSE")
    assert calls == []
    assert store.tables is before
    assert snap.processing_payment is False
    assert snap.current_table.id == "T1"
