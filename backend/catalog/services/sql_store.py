import logging
from contextlib import contextmanager

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from catalog.core.errors import ConflictError, StoreUnavailable
from catalog.models.product import ProductRow
from catalog.schemas.catalog import (
    DecrementResult,
    DecrementStatus,
    Product,
    ProductCandidate,
    fits_db_int,
)
from catalog.services.catalog_store import CatalogStore

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors():
    try:
        yield
    except OperationalError as exc:
        logger.error("Catalog database unreachable: %s", exc.orig)
        raise StoreUnavailable("Catalog store is unreachable") from exc


class SqlCatalogStore(CatalogStore):
    """Catalog store backed by the ``products`` table.

    Every call runs in its own transaction. Uniqueness is enforced by the
    table's UNIQUE constraints and stock by a conditional UPDATE, so the
    database's row locking does the serialization.
    """

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    def _one(self, *criteria) -> Product | None:
        with _store_errors(), self._session_factory() as db:
            row = db.query(ProductRow).filter(*criteria).first()
            return Product.model_validate(row) if row else None

    def get_by_id(self, product_id: int) -> Product | None:
        if not fits_db_int(product_id):
            return None
        return self._one(ProductRow.id == product_id)

    def get_by_name(self, name: str) -> Product | None:
        return self._one(ProductRow.name == name)

    def get_by_sku(self, sku: str) -> Product | None:
        return self._one(ProductRow.sku == sku)

    def _many(self, *criteria) -> list[Product]:
        with _store_errors(), self._session_factory() as db:
            rows = db.query(ProductRow).filter(*criteria).order_by(ProductRow.id.asc()).all()
            return [Product.model_validate(r) for r in rows]

    def list_all(self) -> list[Product]:
        return self._many()

    def list_by_category(self, category_id: int) -> list[Product]:
        if not fits_db_int(category_id):
            return []
        return self._many(ProductRow.category_id == category_id)

    def list_matching(self, term: str) -> list[Product]:
        # LIKE only folds ASCII case, so non-ASCII terms are filtered by the caller alone
        if not term.isascii():
            return self.list_all()
        escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        return self._many(
            or_(
                ProductRow.name.ilike(pattern, escape="\\"),
                ProductRow.description.ilike(pattern, escape="\\"),
            )
        )

    def insert(self, candidate: ProductCandidate) -> Product:
        row = ProductRow(**candidate.model_dump())
        with _store_errors():
            try:
                with self._session_factory.begin() as db:
                    db.add(row)
                    db.flush()
                    product_id = row.id
            except IntegrityError:
                # Lost a race against another insert; report which key clashed
                if self.get_by_name(candidate.name) is not None:
                    raise ConflictError("name", candidate.name)
                if self.get_by_sku(candidate.sku) is not None:
                    raise ConflictError("sku", candidate.sku)
                raise
        # Read back what was committed (rounded price, stored timestamp)
        return self.get_by_id(product_id)

    def try_decrement_stock(self, name: str, quantity: int) -> DecrementResult:
        if not fits_db_int(quantity):
            # No stored stock can cover it; only existence matters
            current = self.get_by_name(name)
            if current is None:
                return DecrementResult(status=DecrementStatus.NOT_FOUND)
            return DecrementResult(status=DecrementStatus.INSUFFICIENT_STOCK, remaining=current.stock)

        with _store_errors(), self._session_factory.begin() as db:
            updated = (
                db.query(ProductRow)
                .filter(ProductRow.name == name, ProductRow.stock >= quantity)
                .update({ProductRow.stock: ProductRow.stock - quantity}, synchronize_session=False)
            )
            # Same transaction: the row is still locked by the UPDATE above
            stock = db.query(ProductRow.stock).filter(ProductRow.name == name).scalar()

        if stock is None:
            return DecrementResult(status=DecrementStatus.NOT_FOUND)
        if not updated:
            return DecrementResult(status=DecrementStatus.INSUFFICIENT_STOCK, remaining=stock)
        return DecrementResult(status=DecrementStatus.SUCCEEDED, remaining=stock)
