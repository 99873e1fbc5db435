from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from mini_pos_cafe.models import SETTLED_STATUSES, Table, TableStatusEnum
from mini_pos_cafe.schemas.table import TableStats


def get_table_stats(tables: Iterable[Table]) -> TableStats:
    """
    Сводная статистика по залу:
    - количество столов по статусам
    - выручка по оплаченным/завершённым заказам
    - среднее время заказа в минутах (только заказы с временем закрытия)
    Пустой зал или ноль заказов дают нули, а не ошибку.
    """
    tables = list(tables)
    by_status = {status: 0 for status in TableStatusEnum}
    for table in tables:
        by_status[table.status] += 1

    settled = [
        order
        for table in tables
        for order in table.order_history
        if order.status in SETTLED_STATUSES
    ]
    revenue = sum((order.total for order in settled), Decimal("0"))

    durations = [
        Decimal(str((order.end_time - order.start_time).total_seconds())) / 60
        for order in settled
        if order.end_time is not None
    ]
    avg_minutes = sum(durations, Decimal("0")) / len(durations) if durations else Decimal("0")

    return TableStats(
        total_tables=len(tables),
        occupied_tables=by_status[TableStatusEnum.occupied],
        free_tables=by_status[TableStatusEnum.free],
        cleaning_tables=by_status[TableStatusEnum.cleaning],
        reserved_tables=by_status[TableStatusEnum.reserved],
        revenue_today=revenue,
        average_order_time=int(avg_minutes.quantize(Decimal("1"), rounding=ROUND_HALF_UP)),
    )


def get_order_duration(start_time: datetime, now: Optional[datetime] = None) -> str:
    """
    Сколько длится заказ, в полных минутах: "42m".
    """
    if start_time.tzinfo is None:
        start_time = start_time.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    minutes = int((now - start_time).total_seconds() // 60)
    return f"{minutes}m"
