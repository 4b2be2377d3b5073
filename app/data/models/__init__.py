# import every model so SQLAlchemy registers it in Base.metadata

from app.data.models.user import UserModel
from app.data.models.catalog import (
    CategoryModel,
    ProductModel,
    ProductImageModel,
    ProductAssetModel,
    ReviewModel,
)
from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.data.models.discount_code import DiscountCodeModel
from app.data.models.order import OrderModel, OrderItemModel
from app.data.models.inventory import InventoryLogModel, AdminLogModel
from app.data.models.customer import (
    ShippingAddressModel,
    WishlistModel,
    PageViewModel,
    RecentlyViewedModel,
)

__all__ = [
    "UserModel",
    "CategoryModel",
    "ProductModel",
    "ProductImageModel",
    "ProductAssetModel",
    "ReviewModel",
    "CartModel",
    "CartItemModel",
    "DiscountCodeModel",
    "OrderModel",
    "OrderItemModel",
    "InventoryLogModel",
    "AdminLogModel",
    "ShippingAddressModel",
    "WishlistModel",
    "PageViewModel",
    "RecentlyViewedModel",
]
