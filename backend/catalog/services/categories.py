import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from catalog.core.errors import StoreUnavailable
from catalog.models.category import CategoryRow
from catalog.schemas.catalog import Category, fits_db_int


class CategoryGateway(ABC):
    """Read-only view of the categories products may reference."""

    @abstractmethod
    def get(self, category_id: int) -> Category | None:
        ...

    def exists(self, category_id: int) -> bool:
        return self.get(category_id) is not None


class InMemoryCategoryGateway(CategoryGateway):
    def __init__(self, categories: list[Category] | None = None):
        self._lock = threading.Lock()
        self._categories: dict[int, Category] = {}
        for c in categories or []:
            self._categories[c.id] = c

    def add(self, name: str) -> Category:
        """Bootstrap helper; categories are never created at runtime."""
        with self._lock:
            new_id = max(self._categories, default=0) + 1
            category = Category(id=new_id, name=name, created_at=datetime.now(timezone.utc))
            self._categories[new_id] = category
        return category

    def get(self, category_id: int) -> Category | None:
        return self._categories.get(category_id)


class SqlCategoryGateway(CategoryGateway):
    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    def get(self, category_id: int) -> Category | None:
        if not fits_db_int(category_id):
            return None
        try:
            with self._session_factory() as db:
                row = db.get(CategoryRow, category_id)
                return Category.model_validate(row) if row else None
        except OperationalError as exc:
            raise StoreUnavailable("Category store is unreachable") from exc
