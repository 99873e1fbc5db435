from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from mini_pos_cafe.db.deps import get_pos_store
from mini_pos_cafe.db.session import POSStore

router = APIRouter()

@router.get("/health", summary="Health check")
async def health_check(store: POSStore = Depends(get_pos_store)):
    """
    Health-check: жив ли процесс и загружен ли каталог.
    """
    return {
        "status": "ok",
        "tables": len(store.tables),
        "menu_items": len(store.menu_items),
        "timestamp": datetime.now(timezone.utc),
    }
