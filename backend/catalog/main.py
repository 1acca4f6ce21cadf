import logging

from fastapi import FastAPI, Depends, Request
from fastapi.responses import JSONResponse

from catalog.core.config import settings, configure_logging
from catalog.core.db import Base, engine, SessionLocal
from catalog.core.errors import ConflictError, NotFoundError, ProductValidationError, StoreUnavailable
from catalog.schemas.catalog import Product, ProductCandidate, PurchaseStatus
from catalog.services.catalog_service import CatalogService
from catalog.services.catalog_store import InMemoryCatalogStore
from catalog.services.categories import InMemoryCategoryGateway, SqlCategoryGateway
from catalog.services.sql_store import SqlCatalogStore
from catalog.seed import seed_if_empty, seed_memory

# Import models so Base.metadata knows them
import catalog.models  # noqa

configure_logging()
logger = logging.getLogger(__name__)


def build_service() -> CatalogService:
    logger.info("Catalog store backend: %s", settings.STORE_BACKEND)
    if settings.STORE_BACKEND == "memory":
        store = InMemoryCatalogStore()
        categories = InMemoryCategoryGateway()
        if settings.SEED_ON_STARTUP:
            seed_memory(store, categories)
        return CatalogService(store, categories)

    # Create tables (Alembic optional)
    Base.metadata.create_all(bind=engine)
    if settings.SEED_ON_STARTUP:
        with SessionLocal() as db:
            seed_if_empty(db)
    return CatalogService(SqlCatalogStore(SessionLocal), SqlCategoryGateway(SessionLocal))


app = FastAPI(title="Catalog Store")

catalog_service = build_service()


def get_catalog_service() -> CatalogService:
    return catalog_service


# -------------------------
# Error mapping
# -------------------------

@app.exception_handler(ProductValidationError)
def validation_error(request: Request, exc: ProductValidationError):
    return JSONResponse(status_code=400, content={"error": exc.result.value, "detail": str(exc)})


@app.exception_handler(ConflictError)
def conflict_error(request: Request, exc: ConflictError):
    return JSONResponse(status_code=400, content={"error": "conflict", "detail": str(exc)})


@app.exception_handler(NotFoundError)
def not_found_error(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"error": "not_found", "detail": str(exc)})


@app.exception_handler(StoreUnavailable)
def store_unavailable(request: Request, exc: StoreUnavailable):
    return JSONResponse(status_code=503, content={"error": "store_unavailable", "detail": str(exc)})


# -------------------------
# Routes
# -------------------------

@app.get("/")
def health():
    return {"status": "ok"}


@app.get("/products", response_model=list[Product])
def list_products(service: CatalogService = Depends(get_catalog_service)):
    return service.list_products()


@app.get("/products/{product_id}", response_model=Product)
def get_product(product_id: int, service: CatalogService = Depends(get_catalog_service)):
    return service.get_product(product_id)


@app.post("/products", response_model=Product, status_code=201)
def create_product(candidate: ProductCandidate, service: CatalogService = Depends(get_catalog_service)):
    return service.create_product(candidate)


@app.get("/products/search/{term}", response_model=list[Product])
def search_products(term: str, service: CatalogService = Depends(get_catalog_service)):
    products = service.search_by_term(term)
    if not products:
        return JSONResponse(
            status_code=404,
            content={"error": "not_found", "detail": f"No products match name or description {term!r}"},
        )
    return products


@app.get("/products/category/{category_id}", response_model=list[Product])
def products_for_category(category_id: int, service: CatalogService = Depends(get_catalog_service)):
    products = service.search_by_category(category_id)
    if not products:
        return JSONResponse(
            status_code=404,
            content={"error": "not_found", "detail": f"No products in category {category_id}"},
        )
    return products


_PURCHASE_FAILURES = {
    PurchaseStatus.PRODUCT_NOT_FOUND: 404,
    PurchaseStatus.INSUFFICIENT_STOCK: 400,
    PurchaseStatus.INVALID_REQUEST: 400,
}


@app.patch("/products/buy/{name}/{quantity}")
def buy_product(name: str, quantity: int, service: CatalogService = Depends(get_catalog_service)):
    # Always hits the store; purchases are never served from a cache
    result = service.buy_product(name, quantity)
    if not result.ok:
        return JSONResponse(
            status_code=_PURCHASE_FAILURES[result.status],
            content={"error": result.status.value, "detail": f"Could not buy {quantity} of {name!r}"},
        )

    units = "unit" if quantity == 1 else "units"
    return {
        "remaining_stock": result.remaining_stock,
        "message": f"Purchased {quantity} {units} of '{name}'",
    }
