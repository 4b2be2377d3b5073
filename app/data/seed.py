# app/data/seed.py
from decimal import Decimal

from app.data.database import SessionLocal, transaction
from app.data.models import (
    CategoryModel,
    DiscountCodeModel,
    ProductAssetModel,
    ProductImageModel,
    ProductModel,
    UserModel,
)
from app.data.models.catalog import MODEL_RESOLUTIONS
from app.services.user_service import hash_password
from app.utils.logging import get_logger
from app.utils.settings import SEED_ADMIN_PASSWORD, SEED_ADMIN_USERNAME

logger = get_logger(__name__)

CATALOG = {
    "Furniture": {
        "description": "Chairs, tables and storage",
        "subcategories": {
            "Chairs": [
                ("Oak Dining Chair", "FUR-CHR-001", "89.99", 25, "Solid oak dining chair"),
                ("Lounge Armchair", "FUR-CHR-002", "249.00", 8, "Upholstered lounge armchair"),
            ],
            "Tables": [
                ("Walnut Coffee Table", "FUR-TBL-001", "199.50", 12, "Walnut coffee table"),
            ],
        },
    },
    "Lighting": {
        "description": "Lamps and fixtures",
        "subcategories": {
            "Desk Lamps": [
                ("Brass Desk Lamp", "LGT-DSK-001", "59.00", 40, "Adjustable brass desk lamp"),
                ("Arc Floor Lamp", "LGT-FLR-001", "129.00", 3, "Arched floor lamp"),
            ],
        },
    },
}


def _slug(name: str) -> str:
    return name.lower().replace(" ", "_")


def _add_product(db, category: CategoryModel, row) -> None:
    name, sku, price, stock, description = row
    product = ProductModel(
        name=name,
        sku=sku,
        price=Decimal(price),
        stock_quantity=stock,
        description=description,
        category=category,
    )
    product.images.append(
        ProductImageModel(image_path=f"/images/products/{_slug(name)}.jpg", alt_text=name, is_primary=True)
    )
    for resolution in MODEL_RESOLUTIONS:
        product.assets.append(
            ProductAssetModel(model_path=f"/models/{resolution}/{_slug(name)}.glb", resolution=resolution)
        )
    db.add(product)


def seed():
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(UserModel).first():
            logger.info("Database already seeded")
            return

        with transaction(db):
            db.add(
                UserModel(
                    username=SEED_ADMIN_USERNAME,
                    email=f"{SEED_ADMIN_USERNAME}@example.com",
                    password_hash=hash_password(SEED_ADMIN_PASSWORD),
                    role="admin",
                )
            )

            for name, entry in CATALOG.items():
                parent = CategoryModel(name=name, description=entry["description"])
                db.add(parent)
                for sub_name, products in entry["subcategories"].items():
                    child = CategoryModel(name=sub_name)
                    parent.subcategories.append(child)
                    for row in products:
                        _add_product(db, child, row)

            db.add(
                DiscountCodeModel(
                    code="WELCOME15",
                    discount_percent=Decimal("15"),
                    minimum_order_amount=Decimal("50"),
                )
            )

        logger.info("Seeded admin user, catalog and WELCOME15 discount")
    finally:
        db.close()


if __name__ == "__main__":
    from app.data.database import Base, engine

    Base.metadata.create_all(bind=engine)
    seed()
