from __future__ import annotations

import os
from decimal import Decimal

# Settings are read at import time; keep the app off the on-disk database
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest

from catalog.core.db import Base, make_engine, make_session_factory
from catalog.models.category import CategoryRow
from catalog.schemas.catalog import ProductCandidate
from catalog.services.catalog_service import CatalogService
from catalog.services.catalog_store import InMemoryCatalogStore
from catalog.services.categories import InMemoryCategoryGateway, SqlCategoryGateway
from catalog.services.sql_store import SqlCatalogStore

CATEGORY_NAMES = ["Electronics", "Books"]


def make_candidate(**overrides) -> ProductCandidate:
    fields = {
        "name": "Widget",
        "sku": "W-1",
        "description": "A small blue widget",
        "price": Decimal("9.99"),
        "stock": 10,
        "category_id": 1,
        "image_url": "https://example.com/widget.png",
    }
    fields.update(overrides)
    return ProductCandidate(**fields)


@pytest.fixture
def memory_categories():
    gateway = InMemoryCategoryGateway()
    for name in CATEGORY_NAMES:
        gateway.add(name)
    return gateway


@pytest.fixture
def memory_store():
    return InMemoryCatalogStore()


@pytest.fixture
def session_factory(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'catalog.db'}")
    Base.metadata.create_all(bind=engine)
    factory = make_session_factory(engine)
    with factory.begin() as db:
        db.add_all([CategoryRow(id=i, name=n) for i, n in enumerate(CATEGORY_NAMES, start=1)])
    yield factory
    engine.dispose()


@pytest.fixture
def sql_store(session_factory):
    return SqlCatalogStore(session_factory)


@pytest.fixture(params=["memory", "sql"])
def backend(request):
    """(store, category gateway) pair for each store implementation."""
    if request.param == "memory":
        return request.getfixturevalue("memory_store"), request.getfixturevalue("memory_categories")
    factory = request.getfixturevalue("session_factory")
    return SqlCatalogStore(factory), SqlCategoryGateway(factory)


@pytest.fixture
def store(backend):
    return backend[0]


@pytest.fixture
def service(backend):
    store, categories = backend
    return CatalogService(store, categories)
