"""Catalog error taxonomy.

Services raise these; the HTTP layer in ``catalog.main`` translates them
into status codes. Purchase outcomes such as insufficient stock are not
errors and come back as ``PurchaseResult`` values instead.
"""

from catalog.schemas.catalog import ValidationResult


class CatalogError(Exception):
    """Base class for every error raised by the catalog core."""


class ProductValidationError(CatalogError):
    """A candidate product was rejected by the business rules."""

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__(f"Product rejected: {result.value}")


class ConflictError(CatalogError):
    """Name or SKU uniqueness was lost to a concurrent insert."""

    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"A product with {field} {value!r} already exists")


class NotFoundError(CatalogError):
    """The requested product does not exist."""


class StoreUnavailable(CatalogError):
    """The durable store could not be reached; nothing was written."""
