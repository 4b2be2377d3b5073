# app/repos/product_repo.py
from typing import List

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from app.data.models.catalog import (
    CategoryModel,
    ProductAssetModel,
    ProductImageModel,
    ProductModel,
    ReviewModel,
)
from app.data.models.user import UserModel
from app.repos.listing import contains


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def _with_primary_image(self):
        return select(ProductModel, ProductImageModel.image_path).outerjoin(
            ProductImageModel,
            (ProductImageModel.product_id == ProductModel.id)
            & ProductImageModel.is_primary.is_(True),
        )

    def list_products(self, *criteria, limit: int | None = None):
        stmt = self._with_primary_image().order_by(ProductModel.id)
        if criteria:
            stmt = stmt.where(*criteria)
        if limit is not None:
            stmt = stmt.limit(limit)
        return self.db.execute(stmt).all()

    def search(self, query: str):
        pattern = contains(query)
        return self.list_products(
            or_(
                ProductModel.name.ilike(pattern, escape="\\"),
                ProductModel.description.ilike(pattern, escape="\\"),
            )
        )

    def get_top_level_categories(self) -> List[CategoryModel]:
        return list(
            self.db.execute(
                select(CategoryModel)
                .where(CategoryModel.parent_id.is_(None))
                .order_by(CategoryModel.name)
            ).scalars()
        )

    def get_images(self, product_id: int) -> List[ProductImageModel]:
        return list(
            self.db.execute(
                select(ProductImageModel)
                .where(ProductImageModel.product_id == product_id)
                .order_by(ProductImageModel.is_primary.desc(), ProductImageModel.id)
            ).scalars()
        )

    def get_assets(self, product_id: int, resolution: str) -> List[ProductAssetModel]:
        return list(
            self.db.execute(
                select(ProductAssetModel).where(
                    ProductAssetModel.product_id == product_id,
                    ProductAssetModel.resolution == resolution,
                )
            ).scalars()
        )

    def get_reviews(self, product_id: int):
        return self.db.execute(
            select(ReviewModel, UserModel.username)
            .join(UserModel, ReviewModel.user_id == UserModel.id)
            .where(ReviewModel.product_id == product_id)
            .order_by(ReviewModel.created_at.desc())
        ).all()

    def get_rating(self, product_id: int):
        return self.db.execute(
            select(func.count(ReviewModel.id), func.avg(ReviewModel.rating)).where(
                ReviewModel.product_id == product_id
            )
        ).one()

    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        """
        Conditional decrement; returns False when the row no longer holds
        enough stock, leaving it untouched.
        """
        result = self.db.execute(
            update(ProductModel)
            .where(
                ProductModel.id == product_id,
                ProductModel.stock_quantity >= quantity,
            )
            .values(stock_quantity=ProductModel.stock_quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def get_low_stock(self):
        return self.db.execute(
            select(ProductModel, CategoryModel.name)
            .outerjoin(CategoryModel, ProductModel.category_id == CategoryModel.id)
            .where(ProductModel.stock_quantity <= ProductModel.low_stock_threshold)
            .order_by(ProductModel.stock_quantity.asc(), ProductModel.name.asc())
        ).all()
