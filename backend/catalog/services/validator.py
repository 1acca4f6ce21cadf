from decimal import Decimal

from catalog.schemas.catalog import (
    DB_INT_MAX,
    IMAGE_URL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    PRICE_DECIMAL_PLACES,
    PRICE_MAX_DIGITS,
    SKU_MAX_LENGTH,
    ProductCandidate,
    ValidationResult,
)

_PRICE_LIMIT = Decimal(10) ** (PRICE_MAX_DIGITS - PRICE_DECIMAL_PLACES)


def _blank(value: str) -> bool:
    return not (value or "").strip()


def _valid_price(price: Decimal) -> bool:
    # Must be stored exactly: no rounding to cents, no overflow
    if not price.is_finite() or price < 0 or price >= _PRICE_LIMIT:
        return False
    return price == round(price, PRICE_DECIMAL_PLACES)


def _valid_fields(candidate: ProductCandidate) -> bool:
    return (
        not _blank(candidate.name)
        and not _blank(candidate.sku)
        and len(candidate.name) <= NAME_MAX_LENGTH
        and len(candidate.sku) <= SKU_MAX_LENGTH
        and len(candidate.image_url) <= IMAGE_URL_MAX_LENGTH
        and _valid_price(candidate.price)
        and 0 <= candidate.stock <= DB_INT_MAX
    )


def validate_new_product(
    candidate: ProductCandidate,
    category_exists: bool,
    name_taken: bool,
    sku_taken: bool,
) -> ValidationResult:
    """
    Business rules for a new product, first failure wins:
    - field sanity (name, sku, image url, price, stock)
    - duplicate name
    - unknown category
    - duplicate sku
    Duplicate name is reported before an unknown category; API clients
    rely on that order.
    """
    if not _valid_fields(candidate):
        return ValidationResult.INVALID_FIELD

    if name_taken:
        return ValidationResult.DUPLICATE_NAME

    if not category_exists:
        return ValidationResult.UNKNOWN_CATEGORY

    if sku_taken:
        return ValidationResult.DUPLICATE_SKU

    return ValidationResult.OK
