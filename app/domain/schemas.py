# app/domain/schemas.py
from datetime import date as Date, datetime
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """Payloads exchanged with storefront scripts use camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class SuccessOut(BaseModel):
    success: bool = True


# =====================================================
# AUTH
# =====================================================
class RegisterIn(CamelModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: str = Field(..., max_length=255)
    password: str
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)


class LoginIn(BaseModel):
    username: str = Field(..., min_length=1, description="Username or email")
    password: str = Field(..., min_length=1)


class UserRead(CamelModel):
    user_id: int
    username: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str


class AuthOut(UserRead):
    success: bool = True


class AuthCheckOut(BaseModel):
    authenticated: bool
    user: Optional[UserRead] = None


# =====================================================
# CATALOG
# =====================================================
class CategoryOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    subcategories: List["CategoryOut"] = []

    model_config = ConfigDict(from_attributes=True)


class ProductOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    sku: Optional[str] = None
    price: Money
    stock_quantity: int
    low_stock_threshold: int
    category_id: Optional[int] = None
    image_path: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ProductImageOut(BaseModel):
    id: int
    image_path: str
    alt_text: Optional[str] = None
    is_primary: bool

    model_config = ConfigDict(from_attributes=True)


class ProductAssetOut(BaseModel):
    id: int
    model_path: str
    resolution: str
    format: str

    model_config = ConfigDict(from_attributes=True)


class ReviewOut(BaseModel):
    id: int
    user_id: int
    username: Optional[str] = None
    rating: int
    comment: Optional[str] = None
    created_at: datetime


class ProductDetailOut(ProductOut):
    images: List[ProductImageOut]
    models: List[ProductAssetOut]
    model_resolution: str
    default_model_path: Optional[str] = None
    reviews: List[ReviewOut]
    review_count: int
    average_rating: Optional[float] = None

    # pydantic reserves the model_ prefix
    model_config = ConfigDict(from_attributes=True, protected_namespaces=())


# =====================================================
# CART
# =====================================================
class ItemIn(CamelModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, gt=0)


class QuantityIn(BaseModel):
    quantity: int = Field(..., ge=1)


class CartLineOut(CamelModel):
    item_id: int
    product_id: int
    name: str
    price: Money
    quantity: int
    subtotal: Money
    image_path: Optional[str] = None


class CartOut(CamelModel):
    cart_id: int
    items: List[CartLineOut]
    item_count: int
    total_quantity: int
    total: Money


class CartChangedOut(CamelModel):
    success: bool = True
    cart_id: int


# =====================================================
# CHECKOUT / ORDERS
# =====================================================
class PaymentIn(CamelModel):
    shipping_address: str = Field(..., min_length=1)
    billing_address: str = Field(..., min_length=1)
    payment_method: str = Field(..., min_length=1, max_length=50)
    discount_code: Optional[str] = None


class OrderPlacedOut(CamelModel):
    success: bool = True
    order_id: int
    total_amount: Money
    discount_amount: Money
    discount_status: str


class OrderItemOut(BaseModel):
    id: int
    product_id: int
    name: Optional[str] = None
    quantity: int
    price: Money


class OrderSummaryOut(BaseModel):
    id: int
    status: str
    total_amount: Money
    discount_amount: Money
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderDetailOut(OrderSummaryOut):
    user_id: int
    username: Optional[str] = None
    email: Optional[str] = None
    shipping_address: str
    billing_address: str
    payment_method: str
    discount_code_id: Optional[int] = None
    items: List[OrderItemOut]


class OrderStatusIn(BaseModel):
    status: str


class PaginationOut(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class AdminOrderRow(BaseModel):
    id: int
    user_id: int
    username: str
    email: str
    status: str
    total_amount: Money
    discount_amount: Money
    item_count: int
    created_at: datetime


class AdminOrderListOut(BaseModel):
    orders: List[AdminOrderRow]
    pagination: PaginationOut


class RecentOrderRow(BaseModel):
    id: int
    username: str
    status: str
    total_amount: Money
    created_at: datetime


# =====================================================
# INVENTORY
# =====================================================
class StockIn(BaseModel):
    stock_quantity: int = Field(..., strict=True)
    reason: Optional[str] = Field(None, max_length=50)


class ProductEditIn(BaseModel):
    stock_quantity: Optional[int] = Field(None, strict=True)
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)


class BulkStockLine(BaseModel):
    product_id: int
    stock_quantity: int = Field(..., strict=True)


class BulkStockIn(BaseModel):
    updates: List[BulkStockLine] = Field(..., min_length=1)


class StockChangedOut(BaseModel):
    success: bool = True
    product_id: int
    stock_quantity: int
    delta: int


class BulkStockOut(BaseModel):
    success: bool = True
    updated: int


class InventoryProductRow(BaseModel):
    id: int
    name: str
    sku: Optional[str] = None
    price: Money
    stock_quantity: int
    low_stock_threshold: int
    category_id: Optional[int] = None
    category_name: Optional[str] = None


class InventoryListOut(BaseModel):
    products: List[InventoryProductRow]
    pagination: PaginationOut


class InventoryLogOut(BaseModel):
    id: int
    product_id: int
    quantity_change: int
    reason: str
    reference_id: Optional[str] = None
    admin_user_id: Optional[int] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# DISCOUNTS
# =====================================================
class DiscountCreateIn(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    discount_percent: Optional[Decimal] = Field(None, gt=0, le=100)
    discount_amount: Optional[Decimal] = Field(None, gt=0)
    minimum_order_amount: Decimal = Field(Decimal("0"), ge=0)
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    is_single_use: bool = False
    max_uses: Optional[int] = Field(None, ge=1)


class DiscountUpdateIn(BaseModel):
    valid_to: Optional[datetime] = None
    is_single_use: bool = False
    max_uses: Optional[int] = Field(None, ge=1)
    minimum_order_amount: Optional[Decimal] = Field(None, ge=0)


class DiscountOut(BaseModel):
    id: int
    code: str
    discount_percent: Optional[Money] = None
    discount_amount: Optional[Money] = None
    minimum_order_amount: Money
    valid_from: datetime
    valid_to: Optional[datetime] = None
    is_single_use: bool
    max_uses: Optional[int] = None
    times_used: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DiscountCreatedOut(BaseModel):
    success: bool = True
    code_id: int


# =====================================================
# CUSTOMER
# =====================================================
class AddressIn(CamelModel):
    street_address: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=1, max_length=100)
    is_default: bool = False


class AddressOut(BaseModel):
    id: int
    street_address: str
    city: str
    state: str
    postal_code: str
    country: str
    is_default: bool

    model_config = ConfigDict(from_attributes=True)


class AddressCreatedOut(CamelModel):
    success: bool = True
    address_id: int


class WishlistToggleIn(CamelModel):
    product_id: Optional[int] = None


class WishlistToggleOut(BaseModel):
    success: bool = True
    added: bool


class WishlistItemOut(BaseModel):
    id: int
    product_id: int
    name: str
    price: Money
    description: Optional[str] = None
    image_path: Optional[str] = None
    added_at: datetime


class RecentlyViewedOut(BaseModel):
    product_id: int
    name: str
    price: Money
    image_path: Optional[str] = None
    viewed_at: datetime


# =====================================================
# ADMIN USERS / ANALYTICS
# =====================================================
class AdminUserOut(BaseModel):
    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str
    created_at: datetime
    last_login: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RoleIn(BaseModel):
    role: str


class SalesOverviewOut(BaseModel):
    total_orders: int
    total_revenue: Money
    average_order_value: Money
    total_customers: int


class SalesByDateRow(BaseModel):
    date: Date
    orders: int
    revenue: Money


class TopProductRow(BaseModel):
    product_id: int
    name: str
    price: Money
    units_sold: int
    revenue: Money


class CustomerStatsOut(BaseModel):
    total_customers: int
    avg_orders_per_customer: float
    avg_customer_value: Money


class BucketRow(BaseModel):
    label: str
    customer_count: int


class CustomerInsightsOut(CamelModel):
    stats: CustomerStatsOut
    order_distribution: List[BucketRow]
    spending_distribution: List[BucketRow]
