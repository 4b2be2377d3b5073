# app/repos/order_repo.py
from typing import List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.data.models.catalog import ProductModel
from app.data.models.order import OrderItemModel, OrderModel
from app.data.models.user import UserModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def add_item(self, item: OrderItemModel) -> OrderItemModel:
        self.db.add(item)
        return item

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_user_orders(self, user_id: int) -> List[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            ).scalars()
        )

    def get_items(self, order_id: int):
        return self.db.execute(
            select(OrderItemModel, ProductModel.name)
            .join(ProductModel, OrderItemModel.product_id == ProductModel.id)
            .where(OrderItemModel.order_id == order_id)
            .order_by(OrderItemModel.id)
        ).all()

    def admin_list_base(self):
        """Order rows with owner and item count, unfiltered and unsorted."""
        item_count = (
            select(func.count(OrderItemModel.id))
            .where(OrderItemModel.order_id == OrderModel.id)
            .correlate(OrderModel)
            .scalar_subquery()
        )
        return select(
            OrderModel,
            UserModel.username,
            UserModel.email,
            item_count.label("item_count"),
        ).join(UserModel, OrderModel.user_id == UserModel.id)

    def get_recent(self, limit: int):
        return self.db.execute(
            select(OrderModel, UserModel.username)
            .join(UserModel, OrderModel.user_id == UserModel.id)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .limit(limit)
        ).all()

    def update_order_status(self, order_id: int, status: str) -> OrderModel | None:
        order = self.get_order(order_id)
        if order:
            order.status = status
            self.db.commit()
            self.db.refresh(order)
        return order
