# app/repos/analytics_repo.py
from datetime import datetime

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session

from app.data.models.catalog import ProductModel
from app.data.models.order import OrderItemModel, OrderModel
from app.data.models.user import UserModel

_NOT_CANCELLED = OrderModel.status != "cancelled"


class AnalyticsRepo:
    def __init__(self, db: Session):
        self.db = db

    def sales_totals(self):
        return self.db.execute(
            select(
                func.count(OrderModel.id),
                func.sum(OrderModel.total_amount),
                func.avg(OrderModel.total_amount),
            ).where(_NOT_CANCELLED)
        ).one()

    def count_ordering_customers(self) -> int:
        return self.db.execute(select(func.count(func.distinct(OrderModel.user_id)))).scalar_one()

    def sales_by_date(self, start: datetime | None, end: datetime | None):
        day = func.date(OrderModel.created_at)
        stmt = select(
            day.label("date"),
            func.count(OrderModel.id).label("orders"),
            func.sum(OrderModel.total_amount).label("revenue"),
        ).where(_NOT_CANCELLED)
        if start is not None:
            stmt = stmt.where(OrderModel.created_at >= start)
        if end is not None:
            stmt = stmt.where(OrderModel.created_at < end)
        return self.db.execute(stmt.group_by(day).order_by(day.desc())).all()

    def top_products(self, limit: int):
        units = func.sum(OrderItemModel.quantity)
        return self.db.execute(
            select(
                ProductModel.id,
                ProductModel.name,
                ProductModel.price,
                units.label("units_sold"),
                func.sum(OrderItemModel.quantity * OrderItemModel.price).label("revenue"),
            )
            .join(OrderItemModel, OrderItemModel.product_id == ProductModel.id)
            .join(OrderModel, OrderItemModel.order_id == OrderModel.id)
            .where(_NOT_CANCELLED)
            .group_by(ProductModel.id, ProductModel.name, ProductModel.price)
            .order_by(units.desc(), ProductModel.id)
            .limit(limit)
        ).all()

    def customer_totals(self):
        """(user_id, order count, amount spent) for every customer, zero-order ones included."""
        return self.db.execute(
            select(
                UserModel.id,
                func.count(OrderModel.id),
                func.coalesce(func.sum(OrderModel.total_amount), 0),
            )
            .outerjoin(OrderModel, and_(OrderModel.user_id == UserModel.id, _NOT_CANCELLED))
            .where(UserModel.role == "customer")
            .group_by(UserModel.id)
        ).all()
