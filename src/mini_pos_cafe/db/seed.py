import logging
from pathlib import Path
from typing import List, Tuple, Union

from pydantic import BaseModel, model_validator

from mini_pos_cafe.models import MenuItem, Table

logger = logging.getLogger(__name__)


class Catalog(BaseModel):
    menu_items: List[MenuItem] = []
    tables: List[Table] = []

    @model_validator(mode="after")
    def check_unique_ids(self) -> "Catalog":
        for name, entries in (("menu item", self.menu_items), ("table", self.tables)):
            ids = [e.id for e in entries]
            duplicates = sorted({i for i in ids if ids.count(i) > 1})
            if duplicates:
                raise ValueError(f"Duplicate {name} ids: {', '.join(duplicates)}")
        return self


def load_catalog(path: Union[str, Path]) -> Tuple[List[MenuItem], List[Table]]:
    """
    Загружает меню и столы из JSON-файла вида
    {"menu_items": [...], "tables": [...]}.
    Ошибки формата пробрасываются как pydantic.ValidationError.
    """
    path = Path(path)
    if not path.is_file():
        raise ValueError(f"Catalog file not found: {path}")

    catalog = Catalog.model_validate_json(path.read_text(encoding="utf-8"))
    logger.info(
        "Loaded catalog %s: %d menu items, %d tables",
        path, len(catalog.menu_items), len(catalog.tables),
    )
    return catalog.menu_items, catalog.tables
