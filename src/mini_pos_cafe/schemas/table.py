from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from mini_pos_cafe.models import MenuItem, Order, Table


class TableStats(BaseModel):
    total_tables: int = 0
    occupied_tables: int = 0
    free_tables: int = 0
    cleaning_tables: int = 0
    reserved_tables: int = 0
    revenue_today: Decimal = Decimal("0")
    average_order_time: int = 0  # минуты


class StartOrderRequest(BaseModel):
    guests: int = Field(ge=0)
    waiter: Optional[str] = None


class CompleteOrderRequest(BaseModel):
    payment_method: str = Field(min_length=1)
    tse_signature: str = Field(min_length=1)


class SelectTableRequest(BaseModel):
    table_id: Optional[str] = None


class CategoryRequest(BaseModel):
    category: str


class SearchRequest(BaseModel):
    search_term: str = ""


class POSSnapshot(BaseModel):
    tables: List[Table]
    menu_items: List[MenuItem]
    current_table: Optional[Table] = None
    current_order: Optional[Order] = None
    selected_category: str
    search_term: str = ""
    processing_payment: bool = False
    table_stats: TableStats
