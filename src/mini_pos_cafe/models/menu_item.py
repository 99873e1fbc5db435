import enum
from decimal import Decimal
from typing import Tuple

from pydantic import BaseModel, Field

# псевдокатегория "без фильтра"
ALL_CATEGORIES = "All"


class MenuCategoryEnum(str, enum.Enum):
    drinks = "Drinks"
    appetizers = "Appetizers"
    main_courses = "Main Courses"
    desserts = "Desserts"


class MenuItem(BaseModel):
    id: str
    name: str
    category: MenuCategoryEnum
    price: Decimal = Field(ge=0)
    vat: Decimal = Field(ge=0)  # ставка НДС в процентах
    icon: str = ""
    tags: Tuple[str, ...] = ()

    class Config:
        frozen = True
