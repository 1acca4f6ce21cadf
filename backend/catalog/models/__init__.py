from catalog.models.category import CategoryRow
from catalog.models.product import ProductRow

__all__ = ["CategoryRow", "ProductRow"]
