# app/services/order_service.py
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, List

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.data.models.order import ORDER_STATUSES, OrderModel
from app.data.models.user import UserModel
from app.domain.errors import NotFoundError
from app.repos.listing import PageRequest, contains, paginate
from app.repos.order_repo import OrderRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_SORTS = {
    "created_at": OrderModel.created_at,
    "total_amount": OrderModel.total_amount,
    "status": OrderModel.status,
    "order_id": OrderModel.id,
    "username": UserModel.username,
}


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


class OrderService:
    """
    Read side of orders for customers and the admin back-office, plus the
    admin-only status change. Orders are created by CheckoutService.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)

    def _items(self, order_id: int) -> List[Dict[str, Any]]:
        return [
            {
                "id": item.id,
                "product_id": item.product_id,
                "name": name,
                "quantity": item.quantity,
                "price": item.price,
            }
            for item, name in self.repo.get_items(order_id)
        ]

    def _detail(self, order: OrderModel) -> Dict[str, Any]:
        return {
            "id": order.id,
            "user_id": order.user_id,
            "username": order.user.username,
            "email": order.user.email,
            "status": order.status,
            "total_amount": order.total_amount,
            "discount_amount": order.discount_amount,
            "shipping_address": order.shipping_address,
            "billing_address": order.billing_address,
            "payment_method": order.payment_method,
            "discount_code_id": order.discount_code_id,
            "created_at": order.created_at,
            "items": self._items(order.id),
        }

    # =====================================================
    # CUSTOMER
    # =====================================================
    def get_user_orders(self, user_id: int) -> List[OrderModel]:
        return self.repo.get_user_orders(user_id)

    def get_user_order(self, order_id: int, user_id: int) -> Dict[str, Any]:
        order = self.repo.get_order(order_id)
        #someone else's order looks the same as a missing one
        if not order or order.user_id != user_id:
            raise NotFoundError("Order not found")
        return self._detail(order)

    # =====================================================
    # ADMIN
    # =====================================================
    def get_order(self, order_id: int) -> Dict[str, Any]:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")
        return self._detail(order)

    def list_orders(
        self,
        request: PageRequest,
        status: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        search: str | None = None,
    ) -> Dict[str, Any]:
        filters = []
        if status:
            filters.append(OrderModel.status == status)
        if start_date:
            filters.append(OrderModel.created_at >= _day_start(start_date))
        if end_date:
            filters.append(OrderModel.created_at < _day_start(end_date + timedelta(days=1)))
        if search:
            pattern = contains(search)
            filters.append(
                or_(
                    UserModel.username.ilike(pattern, escape="\\"),
                    UserModel.email.ilike(pattern, escape="\\"),
                    OrderModel.shipping_address.ilike(pattern, escape="\\"),
                )
            )

        page = paginate(
            self.db,
            self.repo.admin_list_base(),
            filters,
            request,
            ORDER_SORTS,
            default_sort="created_at",
            tiebreaker=OrderModel.id,
        )

        orders = [
            {
                "id": order.id,
                "user_id": order.user_id,
                "username": username,
                "email": email,
                "status": order.status,
                "total_amount": order.total_amount,
                "discount_amount": order.discount_amount,
                "item_count": item_count,
                "created_at": order.created_at,
            }
            for order, username, email, item_count in page.rows
        ]
        return {"orders": orders, "pagination": page.pagination()}

    def get_recent(self, limit: int = 5) -> List[Dict[str, Any]]:
        return [
            {
                "id": order.id,
                "username": username,
                "status": order.status,
                "total_amount": order.total_amount,
                "created_at": order.created_at,
            }
            for order, username in self.repo.get_recent(limit)
        ]

    def update_status(self, order_id: int, status: str) -> OrderModel:
        if status not in ORDER_STATUSES:
            raise ValueError("Invalid status")

        order = self.repo.update_order_status(order_id, status)
        if not order:
            raise NotFoundError("Order not found")

        logger.info(f"Order {order_id} status set to {status}")
        return order
