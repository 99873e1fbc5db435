from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path

from mini_pos_cafe.crud.table import TableOccupiedError
from mini_pos_cafe.db.deps import get_pos_store
from mini_pos_cafe.db.session import POSStore
from mini_pos_cafe.schemas.order import KitchenTicket
from mini_pos_cafe.schemas.table import CompleteOrderRequest, POSSnapshot, StartOrderRequest, TableStats


router = APIRouter(tags=["tables"])

@router.post("/tables/{table_id}/orders", response_model=POSSnapshot)
async def start_order(
    body: StartOrderRequest,
    table_id: str = Path(..., description="ID стола"),
    store: POSStore = Depends(get_pos_store),
):
    """
    Открывает новый заказ на столе.
    Неизвестный стол — состояние не меняется.
    """
    try:
        return store.start_new_order(table_id, body.guests, body.waiter)
    except TableOccupiedError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/tables/{table_id}/complete", response_model=POSSnapshot)
async def complete_order(
    body: CompleteOrderRequest,
    table_id: str = Path(..., description="ID стола"),
    store: POSStore = Depends(get_pos_store),
):
    """
    Закрывает текущий заказ стола как оплаченный, стол уходит на уборку.
    """
    return store.complete_order(table_id, body.payment_method, body.tse_signature)


@router.post("/tables/{table_id}/free", response_model=POSSnapshot)
async def free_table(
    table_id: str = Path(..., description="ID стола"),
    store: POSStore = Depends(get_pos_store),
):
    return store.free_table(table_id)


@router.get("/stats", response_model=TableStats)
async def get_stats(store: POSStore = Depends(get_pos_store)):
    """
    Статистика зала:
    - количество столов по статусам
    - выручка по оплаченным заказам
    - среднее время заказа (минуты)
    """
    return store.snapshot().table_stats


@router.get("/kitchen", response_model=List[KitchenTicket])
async def get_kitchen(store: POSStore = Depends(get_pos_store)):
    """
    Активные заказы для кухни, старые первыми.
    """
    return store.kitchen_tickets()
