from datetime import datetime, timezone
from decimal import Decimal

import pytest

from mini_pos_cafe.config import Settings
from mini_pos_cafe.db.session import POSStore
from mini_pos_cafe.models import MenuCategoryEnum, MenuItem, Table, TableStatusEnum

START = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def make_item(item_id="ITEM_A", price="10.00", vat="19", category=MenuCategoryEnum.main_courses, name=None):
    return MenuItem(
        id=item_id,
        name=name or item_id.title(),
        category=category,
        price=Decimal(price),
        vat=Decimal(vat),
        icon="*",
    )


@pytest.fixture
def item_a():
    return make_item("ITEM_A", "10.00", "19")


@pytest.fixture
def water():
    return make_item("DRINK_WATER", "3.50", "7", MenuCategoryEnum.drinks, "Mineral Water")


@pytest.fixture
def cake():
    return make_item("DESSERT_CAKE", "4.80", "19", MenuCategoryEnum.desserts, "Cake of the Day")


@pytest.fixture
def menu(item_a, water, cake):
    return [item_a, water, cake]


@pytest.fixture
def tables():
    return (
        Table(id="T1", name="Table 1", location="Main Dining"),
        Table(id="T2", name="Table 2", location="Main Dining"),
        Table(id="T3", name="Table 3", status=TableStatusEnum.reserved, location="Terrace"),
    )


@pytest.fixture
def test_settings():
    return Settings(PAYMENT_PROCESSING_DELAY_SECONDS=0, OCCUPIED_TABLE_POLICY="overwrite")


@pytest.fixture
def store(menu, tables, test_settings):
    return POSStore(menu, tables, test_settings)
