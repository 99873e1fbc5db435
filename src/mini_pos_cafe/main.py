import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from mini_pos_cafe.api import health
from mini_pos_cafe.api.routes.orders import router as orders_router
from mini_pos_cafe.api.routes.pos import router as pos_router
from mini_pos_cafe.api.routes.tables import router as tables_router
from mini_pos_cafe.config import settings
from mini_pos_cafe.db.seed import load_catalog
from mini_pos_cafe.db.session import init_store
from mini_pos_cafe.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    if settings.CATALOG_PATH:
        init_store(*load_catalog(settings.CATALOG_PATH))
    else:
        logger.warning("CATALOG_PATH is not set, starting with an empty catalog")
        init_store()
    logger.info("Application started")
    yield
    logger.info("Application stopped")


app = FastAPI(title=settings.APP_TITLE, lifespan=lifespan)

# Подключаем роуты
app.include_router(health.router)
app.include_router(pos_router)
app.include_router(tables_router)
app.include_router(orders_router)
