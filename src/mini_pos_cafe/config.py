from decimal import Decimal
from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_TITLE: str = "Mini POS Cafe"
    LOG_LEVEL: str = "INFO"

    # двухставочная схема НДС (в процентах)
    VAT_RATE_LOW: Decimal = Decimal("7")
    VAT_RATE_HIGH: Decimal = Decimal("19")

    DEFAULT_CATEGORY: str = "All"
    OCCUPIED_TABLE_POLICY: Literal["overwrite", "reject"] = "overwrite"
    AUTO_ASSIGNED_WAITER: str = "Auto-Assigned"
    PAYMENT_PROCESSING_DELAY_SECONDS: float = 2.0

    # JSON с меню и столами; без него стор стартует пустым
    CATALOG_PATH: Optional[str] = None

    class Config:
        env_file = ".env"

settings = Settings()
