from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict

# Column limits of the products table
NAME_MAX_LENGTH = 160
SKU_MAX_LENGTH = 40
IMAGE_URL_MAX_LENGTH = 300
PRICE_MAX_DIGITS = 10
PRICE_DECIMAL_PLACES = 2
# 32-bit INTEGER columns (stock, ids)
DB_INT_MIN = -(2**31)
DB_INT_MAX = 2**31 - 1


def fits_db_int(value: int) -> bool:
    return DB_INT_MIN <= value <= DB_INT_MAX


class Category(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: str
    created_at: datetime


class ProductCandidate(BaseModel):
    """Payload for a product that does not exist yet."""

    name: str
    sku: str
    description: str = ""
    price: Decimal
    stock: int
    category_id: int
    image_url: str = ""


class Product(BaseModel):
    """Immutable snapshot of a stored product."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: str
    sku: str
    description: str
    price: Decimal
    stock: int
    category_id: int
    image_url: str
    created_at: datetime


class ValidationResult(str, Enum):
    OK = "ok"
    INVALID_FIELD = "invalid_field"
    DUPLICATE_NAME = "duplicate_name"
    UNKNOWN_CATEGORY = "unknown_category"
    DUPLICATE_SKU = "duplicate_sku"


class DecrementStatus(str, Enum):
    SUCCEEDED = "succeeded"
    INSUFFICIENT_STOCK = "insufficient_stock"
    NOT_FOUND = "not_found"


class DecrementResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: DecrementStatus
    remaining: int | None = None


class PurchaseStatus(str, Enum):
    PURCHASED = "purchased"
    PRODUCT_NOT_FOUND = "product_not_found"
    INSUFFICIENT_STOCK = "insufficient_stock"
    INVALID_REQUEST = "invalid_request"


class PurchaseResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: PurchaseStatus
    remaining_stock: int | None = None

    @property
    def ok(self) -> bool:
        return self.status is PurchaseStatus.PURCHASED
