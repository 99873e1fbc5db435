from fastapi import APIRouter, Depends

from mini_pos_cafe.db.deps import get_pos_store
from mini_pos_cafe.db.session import POSStore
from mini_pos_cafe.schemas.table import (
    CategoryRequest,
    CompleteOrderRequest,
    POSSnapshot,
    SearchRequest,
    SelectTableRequest,
)


router = APIRouter(prefix="/pos", tags=["pos"])

@router.get("/", response_model=POSSnapshot)
async def get_snapshot(store: POSStore = Depends(get_pos_store)):
    """
    Текущее состояние кассы: столы, меню (с фильтрами), выбранный стол и заказ, статистика.
    """
    return store.snapshot()


@router.post("/select", response_model=POSSnapshot)
async def select_table(body: SelectTableRequest, store: POSStore = Depends(get_pos_store)):
    """
    Выбор стола оператором. table_id=null снимает выбор.
    """
    return store.select_table(body.table_id)


@router.post("/category", response_model=POSSnapshot)
async def set_category(body: CategoryRequest, store: POSStore = Depends(get_pos_store)):
    return store.set_selected_category(body.category)


@router.post("/search", response_model=POSSnapshot)
async def set_search(body: SearchRequest, store: POSStore = Depends(get_pos_store)):
    return store.set_search_term(body.search_term)


@router.post("/payment", response_model=POSSnapshot)
async def process_payment(body: CompleteOrderRequest, store: POSStore = Depends(get_pos_store)):
    """
    Оплата заказа выбранного стола. Ответ приходит после имитации
    обработки платежа терминалом.
    """
    return await store.process_payment(body.payment_method, body.tse_signature)
