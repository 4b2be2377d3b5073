# app/services/cart_service.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from app.data.database import transaction, utcnow
from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.domain.errors import CartNotFoundError, NotFoundError
from app.domain.pricing import ZERO, line_total
from app.repos.cart_repo import CartRepo
from app.repos.product_repo import ProductRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Cart use cases. A cart belongs to a user when one is logged in, otherwise
    to the anonymous session id; a user never owns more than one cart.
    Commands (add, update, remove, clear, attach) change state, get only reads.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    def _find_cart(self, user_id: int | None, session_id: str) -> CartModel | None:
        if user_id is not None:
            return self.repo.get_cart_by_user(user_id)
        return self.repo.get_anonymous_cart(session_id)

    def _get_or_create_cart(self, user_id: int | None, session_id: str) -> CartModel:
        cart = self._find_cart(user_id, session_id)
        if cart:
            return cart

        cart = self.repo.create_cart(
            CartModel(user_id=user_id, session_id=None if user_id is not None else session_id)
        )
        owner = f"user {user_id}" if user_id is not None else "anonymous session"
        logger.info(f"Created cart {cart.id} for {owner}")
        return cart

    # =====================================================
    # QUERY
    # =====================================================
    def get_cart(self, user_id: int | None, session_id: str) -> Dict[str, Any]:
        """Current contents; subtotals use today's product prices."""
        with transaction(self.db):
            cart = self._get_or_create_cart(user_id, session_id)

        lines = []
        total = ZERO
        total_quantity = 0
        for item, product, image_path in self.repo.get_lines_with_images(cart.id):
            line_subtotal = line_total(item.quantity, product.price)
            total += line_subtotal
            total_quantity += item.quantity
            lines.append(
                {
                    "item_id": item.id,
                    "product_id": product.id,
                    "name": product.name,
                    "price": product.price,
                    "quantity": item.quantity,
                    "subtotal": line_subtotal,
                    "image_path": image_path,
                }
            )

        return {
            "cart_id": cart.id,
            "items": lines,
            "item_count": len(lines),
            "total_quantity": total_quantity,
            "total": total,
        }

    # =====================================================
    # COMMANDS
    # =====================================================
    def add_product(self, user_id: int | None, session_id: str, product_id: int, quantity: int = 1) -> int:
        if quantity <= 0:
            raise ValueError("Quantity must be greater than 0")

        product = self.products.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        with transaction(self.db):
            cart = self._get_or_create_cart(user_id, session_id)
            existing_item = self.repo.get_cart_item(cart.id, product_id)
            wanted = quantity + (existing_item.quantity if existing_item else 0)

            #stock is checked against what the cart would hold afterwards
            if product.stock_quantity < wanted:
                raise ValueError("Not enough stock available")

            if existing_item:
                logger.info(
                    f"Product {product_id} already in cart {cart.id}, quantity "
                    f"{existing_item.quantity} -> {wanted}"
                )
                existing_item.quantity = wanted
            else:
                logger.info(f"Adding product {product_id} to cart {cart.id}")
                self.repo.add_cart_item(
                    CartItemModel(cart_id=cart.id, product_id=product_id, quantity=quantity)
                )
            cart.updated_at = utcnow()

        return cart.id

    def update_quantity(self, user_id: int | None, session_id: str, item_id: int, quantity: int) -> None:
        if quantity < 1:
            raise ValueError("Invalid quantity")

        cart = self._find_cart(user_id, session_id)
        if not cart:
            raise CartNotFoundError()

        item = self.repo.get_item(cart.id, item_id)
        if not item:
            raise NotFoundError("Item not found in cart")

        product = self.products.get_product(item.product_id)
        if product.stock_quantity < quantity:
            raise ValueError("Not enough stock available")

        with transaction(self.db):
            item.quantity = quantity
            cart.updated_at = utcnow()

        logger.info(f"Cart {cart.id} item {item_id} quantity set to {quantity}")

    def remove_item(self, user_id: int | None, session_id: str, item_id: int) -> None:
        cart = self._find_cart(user_id, session_id)
        if not cart:
            raise CartNotFoundError()

        item = self.repo.get_item(cart.id, item_id)
        if not item:
            raise NotFoundError("Item not found in cart")

        with transaction(self.db):
            self.repo.delete_item(item)
            cart.updated_at = utcnow()

        logger.info(f"Removed item {item_id} from cart {cart.id}")

    def clear(self, user_id: int | None, session_id: str) -> int:
        cart = self._find_cart(user_id, session_id)
        if not cart:
            raise CartNotFoundError()

        with transaction(self.db):
            removed = self.repo.clear_items(cart.id)
            cart.updated_at = utcnow()

        logger.info(f"Cleared {removed} items from cart {cart.id}")
        return removed

    def attach_to_user(self, session_id: str, user_id: int) -> CartModel | None:
        """
        Hands the session's anonymous cart to a user who just logged in. When
        the user already owns a cart the anonymous lines are merged into it
        (quantities add up, capped at the product's stock) and the anonymous
        cart is dropped.
        """
        anonymous = self.repo.get_anonymous_cart(session_id)
        if not anonymous:
            return self.repo.get_cart_by_user(user_id)

        owned = self.repo.get_cart_by_user(user_id)

        with transaction(self.db):
            if not owned:
                anonymous.user_id = user_id
                anonymous.session_id = None
                anonymous.updated_at = utcnow()
                logger.info(f"Cart {anonymous.id} reassigned to user {user_id}")
                return anonymous

            for item in list(anonymous.items):
                product = self.products.get_product(item.product_id)
                target = self.repo.get_cart_item(owned.id, item.product_id)
                current = target.quantity if target else 0

                #merged lines stop at current stock; a line already above it is left alone
                merged = min(current + item.quantity, max(product.stock_quantity, current))
                if merged < current + item.quantity:
                    logger.info(
                        f"Merge of product {item.product_id} into cart {owned.id} capped at {merged} "
                        f"(stock {product.stock_quantity})"
                    )
                if merged == current:
                    continue

                if target:
                    target.quantity = merged
                else:
                    self.repo.add_cart_item(
                        CartItemModel(cart_id=owned.id, product_id=item.product_id, quantity=merged)
                    )
            self.repo.delete_cart(anonymous)
            owned.updated_at = utcnow()

        logger.info(f"Merged anonymous cart {anonymous.id} into cart {owned.id} of user {user_id}")
        return owned
