# app/services/checkout_service.py
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.orm import Session

from app.data.database import transaction
from app.data.models.inventory import InventoryLogModel
from app.data.models.order import OrderItemModel, OrderModel
from app.domain.errors import (
    CartNotFoundError,
    DiscountUnavailableError,
    EmptyCartError,
    InsufficientStockError,
)
from app.domain.pricing import subtotal as cart_subtotal, to_money
from app.repos.cart_repo import CartRepo
from app.repos.inventory_repo import InventoryRepo
from app.repos.order_repo import OrderRepo
from app.repos.product_repo import ProductRepo
from app.services.discount_service import DiscountService
from app.services.notification_service import NotificationService
from app.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_REASON = "order"


@dataclass(frozen=True)
class PlacedOrder:
    order_id: int
    subtotal: Decimal
    total_amount: Decimal
    discount_amount: Decimal
    discount_status: str


class CheckoutService:
    """
    Turns a user's cart into an order in one transaction: order row, frozen
    order lines, stock decrement with inventory log entries, discount usage
    and cart clearing all commit together or not at all.
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.db = db
        self.carts = CartRepo(db)
        self.products = ProductRepo(db)
        self.orders = OrderRepo(db)
        self.inventory = InventoryRepo(db)
        self.discounts = DiscountService(db)
        self.notification_service = notification_service or NotificationService()

    def place_order(
        self,
        user_id: int,
        shipping_address: str,
        billing_address: str,
        payment_method: str,
        discount_code: str | None = None,
    ) -> PlacedOrder:
        cart = self.carts.get_cart_by_user(user_id)
        if not cart:
            raise CartNotFoundError()

        lines = self.carts.get_lines(cart.id)
        if not lines:
            raise EmptyCartError()

        #all lines must be coverable before anything is written, no partial fulfillment
        for item, product in lines:
            if product.stock_quantity < item.quantity:
                raise InsufficientStockError(product.id)

        subtotal = cart_subtotal((item.quantity, product.price) for item, product in lines)
        discount = self.discounts.resolve(discount_code, subtotal)
        total_amount = subtotal - discount.amount

        # payment is simulated; a gateway call would go here, outside the transaction

        with transaction(self.db):
            order = self.orders.add_order(
                OrderModel(
                    user_id=user_id,
                    status="pending",
                    total_amount=total_amount,
                    discount_amount=discount.amount,
                    shipping_address=shipping_address,
                    billing_address=billing_address,
                    payment_method=payment_method,
                    discount_code_id=discount.code_id if discount.applied else None,
                )
            )

            for item, product in lines:
                self.orders.add_item(
                    OrderItemModel(
                        order_id=order.id,
                        product_id=product.id,
                        quantity=item.quantity,
                        price=to_money(product.price),
                    )
                )

                #a concurrent checkout may have taken the stock since the precheck
                if not self.products.decrement_stock(product.id, item.quantity):
                    raise InsufficientStockError(product.id)

                self.inventory.add_log(
                    InventoryLogModel(
                        product_id=product.id,
                        quantity_change=-item.quantity,
                        reason=ORDER_REASON,
                        reference_id=f"order_{order.id}",
                    )
                )

            if discount.applied and not self.discounts.repo.increment_usage(discount.code_id):
                raise DiscountUnavailableError(discount.code)

            self.carts.clear_items(cart.id)
            order_id = order.id

        logger.info(
            f"Order {order_id} placed by user {user_id}: subtotal {subtotal}, "
            f"discount {discount.amount} ({discount.status}), total {total_amount}"
        )

        self.notification_service.send_order_confirmation(user_id, order_id)

        return PlacedOrder(
            order_id=order_id,
            subtotal=subtotal,
            total_amount=total_amount,
            discount_amount=discount.amount,
            discount_status=discount.status,
        )
