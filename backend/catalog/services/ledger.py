import logging

from catalog.schemas.catalog import DecrementStatus, PurchaseResult, PurchaseStatus
from catalog.services.catalog_store import CatalogStore

logger = logging.getLogger(__name__)

_OUTCOMES = {
    DecrementStatus.SUCCEEDED: PurchaseStatus.PURCHASED,
    DecrementStatus.INSUFFICIENT_STOCK: PurchaseStatus.INSUFFICIENT_STOCK,
    DecrementStatus.NOT_FOUND: PurchaseStatus.PRODUCT_NOT_FOUND,
}


class InventoryLedger:
    """The only component that changes stock."""

    def __init__(self, store: CatalogStore):
        self._store = store

    def purchase(self, name: str, quantity: int) -> PurchaseResult:
        if not (name or "").strip() or quantity <= 0:
            logger.info("Rejected purchase request name=%r quantity=%s", name, quantity)
            return PurchaseResult(status=PurchaseStatus.INVALID_REQUEST)

        if self._store.get_by_name(name) is None:
            return PurchaseResult(status=PurchaseStatus.PRODUCT_NOT_FOUND)

        # No retry: running out of stock is a final answer
        decrement = self._store.try_decrement_stock(name, quantity)
        status = _OUTCOMES[decrement.status]

        if status is PurchaseStatus.PURCHASED:
            logger.info("Sold %s x %r, %s left", quantity, name, decrement.remaining)
            return PurchaseResult(status=status, remaining_stock=decrement.remaining)

        logger.info("Purchase of %s x %r refused: %s", quantity, name, status.value)
        return PurchaseResult(status=status)
