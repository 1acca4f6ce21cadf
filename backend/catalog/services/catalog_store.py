"""Catalog store contract and the in-process reference implementation.

``try_decrement_stock`` and ``insert`` are the only writes. Each one checks
and mutates in a single critical section so callers never do a
read-compare-write of their own.
"""

import threading
from abc import ABC, abstractmethod
from collections import defaultdict
from datetime import datetime, timezone

from catalog.core.errors import ConflictError
from catalog.schemas.catalog import (
    DecrementResult,
    DecrementStatus,
    Product,
    ProductCandidate,
)


class CatalogStore(ABC):

    @abstractmethod
    def get_by_id(self, product_id: int) -> Product | None:
        """Return the product with this id, or None."""

    @abstractmethod
    def get_by_name(self, name: str) -> Product | None:
        """Return the product with this exact (case-sensitive) name, or None."""

    @abstractmethod
    def get_by_sku(self, sku: str) -> Product | None:
        """Return the product with this SKU, or None."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in insertion order."""

    @abstractmethod
    def list_by_category(self, category_id: int) -> list[Product]:
        """Return the products referencing ``category_id``."""

    def list_matching(self, term: str) -> list[Product]:
        """Narrow the catalog for a text search.

        May return extra products, never fewer than match; the default is
        everything. The search engine applies the exact match.
        """
        return self.list_all()

    @abstractmethod
    def insert(self, candidate: ProductCandidate) -> Product:
        """Store a new product and return it with its id.

        Raises ConflictError when the name or SKU is already taken.
        """

    @abstractmethod
    def try_decrement_stock(self, name: str, quantity: int) -> DecrementResult:
        """Atomically take ``quantity`` units if at least that many remain."""


class InMemoryCatalogStore(CatalogStore):
    """Process-local store.

    ``_index_lock`` guards the dicts and id allocation and is held only for
    dict operations. ``_stock_locks`` holds one lock per product id so
    decrements on different products never contend.
    """

    def __init__(self):
        self._index_lock = threading.Lock()
        self._stock_locks: defaultdict[int, threading.Lock] = defaultdict(threading.Lock)
        self._records: dict[int, Product] = {}
        self._ids_by_name: dict[str, int] = {}
        self._ids_by_sku: dict[str, int] = {}
        self._next_id = 1

    def get_by_id(self, product_id: int) -> Product | None:
        return self._records.get(product_id)

    def get_by_name(self, name: str) -> Product | None:
        with self._index_lock:
            product_id = self._ids_by_name.get(name)
            return self._records.get(product_id) if product_id is not None else None

    def get_by_sku(self, sku: str) -> Product | None:
        with self._index_lock:
            product_id = self._ids_by_sku.get(sku)
            return self._records.get(product_id) if product_id is not None else None

    def list_all(self) -> list[Product]:
        with self._index_lock:
            return list(self._records.values())

    def list_by_category(self, category_id: int) -> list[Product]:
        return [p for p in self.list_all() if p.category_id == category_id]

    def insert(self, candidate: ProductCandidate) -> Product:
        with self._index_lock:
            if candidate.name in self._ids_by_name:
                raise ConflictError("name", candidate.name)
            if candidate.sku in self._ids_by_sku:
                raise ConflictError("sku", candidate.sku)

            product = Product(
                id=self._next_id,
                created_at=datetime.now(timezone.utc),
                **candidate.model_dump(),
            )
            self._next_id += 1
            self._records[product.id] = product
            self._ids_by_name[product.name] = product.id
            self._ids_by_sku[product.sku] = product.id
            return product

    def _stock_lock(self, product_id: int) -> threading.Lock:
        with self._index_lock:
            return self._stock_locks[product_id]

    def try_decrement_stock(self, name: str, quantity: int) -> DecrementResult:
        with self._index_lock:
            product_id = self._ids_by_name.get(name)
        if product_id is None:
            return DecrementResult(status=DecrementStatus.NOT_FOUND)

        with self._stock_lock(product_id):
            current = self._records.get(product_id)
            if current is None:
                return DecrementResult(status=DecrementStatus.NOT_FOUND)
            if current.stock < quantity:
                return DecrementResult(
                    status=DecrementStatus.INSUFFICIENT_STOCK,
                    remaining=current.stock,
                )
            updated = current.model_copy(update={"stock": current.stock - quantity})
            with self._index_lock:
                self._records[product_id] = updated
            return DecrementResult(status=DecrementStatus.SUCCEEDED, remaining=updated.stock)
