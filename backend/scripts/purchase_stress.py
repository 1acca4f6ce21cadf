from __future__ import annotations

import argparse
import threading
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

from catalog.core.config import configure_logging
from catalog.core.db import Base, make_engine, make_session_factory
from catalog.models.category import CategoryRow
from catalog.schemas.catalog import ProductCandidate
from catalog.services.catalog_service import CatalogService
from catalog.services.catalog_store import InMemoryCatalogStore
from catalog.services.categories import InMemoryCategoryGateway, SqlCategoryGateway
from catalog.services.sql_store import SqlCatalogStore


def build(backend: str, url: str) -> CatalogService:
    if backend == "memory":
        categories = InMemoryCategoryGateway()
        categories.add("Stress")
        return CatalogService(InMemoryCatalogStore(), categories)

    engine = make_engine(url)
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    factory = make_session_factory(engine)
    with factory.begin() as db:
        db.add(CategoryRow(id=1, name="Stress"))
    return CatalogService(SqlCatalogStore(factory), SqlCategoryGateway(factory))


def main():
    parser = argparse.ArgumentParser(description="Fire concurrent purchases at one product and check for oversell.")
    parser.add_argument("--backend", choices=["memory", "sql"], default="memory")
    parser.add_argument("--url", default="sqlite:///./stress.db")
    parser.add_argument("--stock", type=int, default=100)
    parser.add_argument("--buyers", type=int, default=32)
    parser.add_argument("--quantity", type=int, default=7)
    args = parser.parse_args()

    configure_logging()
    service = build(args.backend, args.url)
    service.create_product(
        ProductCandidate(name="Stress Widget", sku="STRESS-1", price=Decimal("1.00"), stock=args.stock, category_id=1)
    )

    barrier = threading.Barrier(args.buyers)

    def buy(_):
        barrier.wait()
        return service.buy_product("Stress Widget", args.quantity)

    with ThreadPoolExecutor(max_workers=args.buyers) as pool:
        results = list(pool.map(buy, range(args.buyers)))

    outcomes = Counter(r.status.value for r in results)
    sold = outcomes["purchased"] * args.quantity
    left = service.store.get_by_name("Stress Widget").stock

    print(f"Backend: {args.backend}")
    print(f"Buyers: {args.buyers} x {args.quantity} against stock {args.stock}")
    for status, count in sorted(outcomes.items()):
        print(f"  {status.ljust(20)}{count}")
    print(f"Sold: {sold}  Left: {left}")

    if sold > args.stock or sold + left != args.stock:
        raise SystemExit("OVERSOLD")
    print("No oversell.")


if __name__ == "__main__":
    main()
