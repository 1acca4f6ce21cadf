from catalog.schemas.catalog import Product
from catalog.services.catalog_store import CatalogStore


class SearchEngine:
    def __init__(self, store: CatalogStore):
        self._store = store

    def search(self, term: str) -> list[Product]:
        """Case-insensitive substring match on name or description."""
        needle = (term or "").casefold()
        return [
            p for p in self._store.list_matching(term or "")
            if needle in p.name.casefold() or needle in p.description.casefold()
        ]

    def by_category(self, category_id: int) -> list[Product]:
        # Unknown categories simply have no products
        return self._store.list_by_category(category_id)
