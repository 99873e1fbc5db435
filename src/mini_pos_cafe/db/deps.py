from mini_pos_cafe.db.session import POSStore, get_store


def get_pos_store() -> POSStore:
    """
    Использовать в Depends(get_pos_store)
    Пример: def endpoint(store: POSStore = Depends(get_pos_store))
    """
    return get_store()
