# app/repos/cart_repo.py
from typing import List, Tuple

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.data.models.catalog import ProductImageModel, ProductModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def get_anonymous_cart(self, session_id: str) -> CartModel | None:
        return self.db.execute(
            select(CartModel)
            .where(CartModel.user_id.is_(None), CartModel.session_id == session_id)
            .order_by(CartModel.id)
            .limit(1)
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.flush()
        return cart

    def delete_cart(self, cart: CartModel) -> None:
        self.db.delete(cart)

    def get_lines(self, cart_id: int) -> List[Tuple[CartItemModel, ProductModel]]:
        """Cart items joined with their product rows, oldest line first."""
        rows = self.db.execute(
            select(CartItemModel, ProductModel)
            .join(ProductModel, CartItemModel.product_id == ProductModel.id)
            .where(CartItemModel.cart_id == cart_id)
            .order_by(CartItemModel.id)
        ).all()
        return [(item, product) for item, product in rows]

    def get_lines_with_images(self, cart_id: int):
        return self.db.execute(
            select(CartItemModel, ProductModel, ProductImageModel.image_path)
            .join(ProductModel, CartItemModel.product_id == ProductModel.id)
            .outerjoin(
                ProductImageModel,
                (ProductImageModel.product_id == ProductModel.id)
                & ProductImageModel.is_primary.is_(True),
            )
            .where(CartItemModel.cart_id == cart_id)
            .order_by(CartItemModel.id)
        ).all()

    def get_cart_item(self, cart_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def get_item(self, cart_id: int, item_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.id == item_id,
                CartItemModel.cart_id == cart_id,
            )
        ).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_item(self, item: CartItemModel) -> None:
        self.db.delete(item)
        self.db.flush()

    def clear_items(self, cart_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.cart_id == cart_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def get_abandoned_anonymous_carts(self, cutoff) -> List[CartModel]:
        return list(
            self.db.execute(
                select(CartModel).where(
                    CartModel.user_id.is_(None),
                    CartModel.updated_at < cutoff,
                )
            ).scalars()
        )

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
