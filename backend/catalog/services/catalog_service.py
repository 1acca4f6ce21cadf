import logging

from catalog.core.errors import NotFoundError, ProductValidationError
from catalog.schemas.catalog import Product, ProductCandidate, PurchaseResult, ValidationResult
from catalog.services.catalog_store import CatalogStore
from catalog.services.categories import CategoryGateway
from catalog.services.ledger import InventoryLedger
from catalog.services.search import SearchEngine
from catalog.services.validator import validate_new_product

logger = logging.getLogger(__name__)


class CatalogService:
    """Use cases the HTTP layer calls. Safe to share across request threads."""

    def __init__(self, store: CatalogStore, categories: CategoryGateway):
        self.store = store
        self.categories = categories
        self.search = SearchEngine(store)
        self.ledger = InventoryLedger(store)

    def create_product(self, candidate: ProductCandidate) -> Product:
        result = validate_new_product(
            candidate,
            category_exists=self.categories.exists(candidate.category_id),
            name_taken=self.store.get_by_name(candidate.name) is not None,
            sku_taken=self.store.get_by_sku(candidate.sku) is not None,
        )
        if result is not ValidationResult.OK:
            logger.info("Rejected product %r: %s", candidate.name, result.value)
            raise ProductValidationError(result)

        # insert re-checks uniqueness atomically; ConflictError means a race was lost
        product = self.store.insert(candidate)
        logger.info("Created product id=%s name=%r sku=%r", product.id, product.name, product.sku)
        return product

    def get_product(self, product_id: int) -> Product:
        product = self.store.get_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} does not exist")
        return product

    def list_products(self) -> list[Product]:
        return self.store.list_all()

    def search_by_term(self, term: str) -> list[Product]:
        return self.search.search(term)

    def search_by_category(self, category_id: int) -> list[Product]:
        return self.search.by_category(category_id)

    def buy_product(self, name: str, quantity: int) -> PurchaseResult:
        return self.ledger.purchase(name, quantity)
