import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from catalog.core.config import configure_logging
from catalog.core.db import Base, SessionLocal
from catalog.models.category import CategoryRow
from catalog.models.product import ProductRow
from catalog.schemas.catalog import ProductCandidate
from catalog.services.catalog_store import CatalogStore
from catalog.services.categories import InMemoryCategoryGateway

logger = logging.getLogger(__name__)

CATEGORIES = [
    "Ropa y accesorios",
    "Electrónicos",
    "Deportes",
    "Hogar",
    "Libros",
]

# category_id refers to the 1-based position in CATEGORIES
PRODUCTS = [
    ProductCandidate(
        name="Camiseta Básica",
        description="Camiseta de algodón 100%",
        price=Decimal("25.99"),
        sku="PROD-001-CAM-M",
        stock=50,
        category_id=1,
        image_url="https://via.placeholder.com/300x300/FF0000/FFFFFF?text=Camiseta",
    ),
    ProductCandidate(
        name="Smartphone Galaxy",
        description="Teléfono inteligente con 128GB",
        price=Decimal("599.99"),
        sku="PROD-002-PHO-BLK",
        stock=25,
        category_id=2,
        image_url="https://via.placeholder.com/300x300/0000FF/FFFFFF?text=Smartphone",
    ),
    ProductCandidate(
        name="Pelota de Fútbol",
        description="Pelota oficial FIFA",
        price=Decimal("45.00"),
        sku="PROD-003-BAL-WHT",
        stock=30,
        category_id=3,
        image_url="https://via.placeholder.com/300x300/00FF00/FFFFFF?text=Pelota",
    ),
    ProductCandidate(
        name="Lámpara de Mesa",
        description="Lámpara LED regulable",
        price=Decimal("89.99"),
        sku="PROD-004-LAM-WHT",
        stock=15,
        category_id=4,
        image_url="https://via.placeholder.com/300x300/FFFF00/000000?text=Lampara",
    ),
    ProductCandidate(
        name="El Quijote",
        description="Novela clásica de Cervantes",
        price=Decimal("19.99"),
        sku="PROD-005-LIB-ESP",
        stock=100,
        category_id=5,
        image_url="https://via.placeholder.com/300x300/800080/FFFFFF?text=Libro",
    ),
    ProductCandidate(
        name="Jeans Clásicos",
        description="Pantalones vaqueros azules",
        price=Decimal("79.99"),
        sku="PROD-006-PAN-BLU",
        stock=40,
        category_id=1,
        image_url="https://via.placeholder.com/300x300/4169E1/FFFFFF?text=Jeans",
    ),
    ProductCandidate(
        name="Tablet Pro",
        description="Tablet 10.5 pulgadas con stylus incluido",
        price=Decimal("459.99"),
        sku="PROD-007-TAB-SIL",
        stock=20,
        category_id=2,
        image_url="https://via.placeholder.com/300x300/C0C0C0/000000?text=Tablet",
    ),
    ProductCandidate(
        name="Zapatillas Running",
        description="Zapatillas deportivas para correr",
        price=Decimal("129.99"),
        sku="PROD-008-ZAP-BLK",
        stock=35,
        category_id=3,
        image_url="https://via.placeholder.com/300x300/000000/FFFFFF?text=Zapatillas",
    ),
    ProductCandidate(
        name="Cafetera Express",
        description="Cafetera automática con molinillo integrado",
        price=Decimal("299.99"),
        sku="PROD-009-CAF-BLK",
        stock=12,
        category_id=4,
        image_url="https://via.placeholder.com/300x300/2F4F4F/FFFFFF?text=Cafetera",
    ),
    ProductCandidate(
        name="Programación en C#",
        description="Guía completa de programación en C# y .NET",
        price=Decimal("49.99"),
        sku="PROD-010-LIB-ESP",
        stock=80,
        category_id=5,
        image_url="https://via.placeholder.com/300x300/008B8B/FFFFFF?text=C%23+Book",
    ),
    ProductCandidate(
        name="Chaqueta Deportiva",
        description="Chaqueta impermeable para actividades al aire libre",
        price=Decimal("149.99"),
        sku="PROD-011-CHA-NAV",
        stock=28,
        category_id=1,
        image_url="https://via.placeholder.com/300x300/000080/FFFFFF?text=Chaqueta",
    ),
    ProductCandidate(
        name="Auriculares Bluetooth",
        description="Auriculares inalámbricos con cancelación de ruido",
        price=Decimal("189.99"),
        sku="PROD-012-AUR-BLK",
        stock=45,
        category_id=2,
        image_url="https://via.placeholder.com/300x300/1C1C1C/FFFFFF?text=Auriculares",
    ),
]


def reset_db(db: Session):
    # Drops & recreates all tables
    bind = db.get_bind()
    Base.metadata.drop_all(bind=bind)
    Base.metadata.create_all(bind=bind)


def seed_categories(db: Session):
    db.add_all([CategoryRow(id=i, name=name) for i, name in enumerate(CATEGORIES, start=1)])
    db.flush()


def seed_products(db: Session):
    db.add_all([ProductRow(**p.model_dump()) for p in PRODUCTS])


def seed_if_empty(db: Session) -> bool:
    """Load the reference data unless categories already exist."""
    if db.query(CategoryRow).first() is not None:
        return False
    seed_categories(db)
    seed_products(db)
    db.commit()
    logger.info("Seeded %d categories and %d products", len(CATEGORIES), len(PRODUCTS))
    return True


def seed_memory(store: CatalogStore, categories: InMemoryCategoryGateway):
    for name in CATEGORIES:
        categories.add(name)
    for p in PRODUCTS:
        store.insert(p)


def main():
    configure_logging()
    db = SessionLocal()
    try:
        reset_db(db)
        seed_categories(db)
        seed_products(db)
        db.commit()

        print("✅ Seed complete.")
        print(f"- {len(CATEGORIES)} categories")
        print(f"- {len(PRODUCTS)} products")
    finally:
        db.close()


if __name__ == "__main__":
    main()
