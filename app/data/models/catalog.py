#app/data/models/catalog.py
from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from app.data.database import Base, utcnow

MODEL_RESOLUTIONS = ("high", "medium", "low")


class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    parent_id = Column(Integer, ForeignKey("categories.id"))

    subcategories = relationship("CategoryModel", order_by="CategoryModel.name")


class ProductModel(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
    )

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    sku = Column(String(64), unique=True)
    price = Column(Numeric(10, 2), nullable=False)

    stock_quantity = Column(Integer, nullable=False, default=0)
    low_stock_threshold = Column(Integer, nullable=False, default=5)
    category_id = Column(Integer, ForeignKey("categories.id"))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    category = relationship("CategoryModel")
    images = relationship("ProductImageModel", cascade="all, delete-orphan")
    assets = relationship("ProductAssetModel", cascade="all, delete-orphan")


class ProductImageModel(Base):
    __tablename__ = "product_images"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    image_path = Column(String(500), nullable=False)
    alt_text = Column(String(200))
    is_primary = Column(Boolean, nullable=False, default=False)


class ProductAssetModel(Base):
    """3D model file of a product at one resolution tier."""

    __tablename__ = "product_models"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    model_path = Column(String(500), nullable=False)
    resolution = Column(String(10), nullable=False, default="high")
    format = Column(String(10), nullable=False, default="glb")


class ReviewModel(Base):
    __tablename__ = "reviews"
    __table_args__ = (CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating"),)

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
