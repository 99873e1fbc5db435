from fastapi import APIRouter, Depends, HTTPException, Path

from mini_pos_cafe.db.deps import get_pos_store
from mini_pos_cafe.db.session import POSStore
from mini_pos_cafe.crud.table import get_current_order
from mini_pos_cafe.schemas.order import LineItemAdd, LineItemUpdate, VATBreakdown
from mini_pos_cafe.schemas.table import POSSnapshot


# операции над заказом выбранного стола
router = APIRouter(prefix="/order", tags=["order"])

@router.post("/items", response_model=POSSnapshot)
async def add_item(body: LineItemAdd, store: POSStore = Depends(get_pos_store)):
    """
    Добавляет позицию меню в текущий заказ.
    Повторное добавление увеличивает количество.
    """
    return store.add_to_order(body.menu_item_id)


@router.patch("/items/{index}", response_model=POSSnapshot)
async def update_item(
    body: LineItemUpdate,
    index: int = Path(..., description="Номер строки заказа"),
    store: POSStore = Depends(get_pos_store),
):
    """
    Частичное обновление строки заказа.
    Поддерживаемые поля: delta (изменение количества), notes.
    """
    if body.delta is None and body.notes is None:
        raise HTTPException(status_code=400, detail="Nothing to update: pass delta or notes")

    snapshot = None
    if body.notes is not None:
        snapshot = store.set_item_notes(index, body.notes)
    if body.delta is not None:
        snapshot = store.update_quantity(index, body.delta)
    return snapshot


@router.delete("/items/{index}", response_model=POSSnapshot)
async def remove_item(
    index: int = Path(..., description="Номер строки заказа"),
    store: POSStore = Depends(get_pos_store),
):
    return store.remove_item(index)


@router.get("/vat", response_model=VATBreakdown)
async def get_vat_breakdown(store: POSStore = Depends(get_pos_store)):
    """
    Разбивка НДС по текущему заказу. Без заказа — нули.
    """
    order = get_current_order(store.current_table)
    return store.calculate_vat_breakdown(order.items if order else ())
