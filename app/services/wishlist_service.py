# app/services/wishlist_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.data.database import transaction
from app.data.models.customer import WishlistModel
from app.domain.errors import NotFoundError
from app.repos.customer_repo import WishlistRepo
from app.repos.product_repo import ProductRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


class WishlistService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = WishlistRepo(db)
        self.products = ProductRepo(db)

    def list_items(self, user_id: int) -> List[Dict[str, Any]]:
        return [
            {
                "id": entry.id,
                "product_id": product.id,
                "name": product.name,
                "price": product.price,
                "description": product.description,
                "image_path": image_path,
                "added_at": entry.added_at,
            }
            for entry, product, image_path in self.repo.list_for_user(user_id)
        ]

    def toggle(self, user_id: int, product_id: int | None) -> bool:
        """Adds the product when absent, removes it when present. Returns True if added."""
        if not product_id:
            raise ValueError("Product ID is required")
        if not self.products.get_product(product_id):
            raise NotFoundError("Product not found")

        entry = self.repo.get_entry(user_id, product_id)
        with transaction(self.db):
            if entry:
                self.repo.delete(entry)
            else:
                self.repo.add(WishlistModel(user_id=user_id, product_id=product_id))

        logger.info(f"User {user_id} {'removed' if entry else 'added'} product {product_id} on wishlist")
        return entry is None

    def remove(self, user_id: int, wishlist_id: int) -> None:
        entry = self.repo.get_for_user(wishlist_id, user_id)
        if not entry:
            raise NotFoundError("Wishlist item not found")

        with transaction(self.db):
            self.repo.delete(entry)
