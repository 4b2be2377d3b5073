# app/repos/customer_repo.py
from typing import List

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.data.models.catalog import ProductImageModel, ProductModel
from app.data.models.customer import (
    PageViewModel,
    RecentlyViewedModel,
    ShippingAddressModel,
    WishlistModel,
)


def _primary_image_join():
    return (ProductImageModel.product_id == ProductModel.id) & ProductImageModel.is_primary.is_(True)


class AddressRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_for_user(self, user_id: int) -> List[ShippingAddressModel]:
        return list(
            self.db.execute(
                select(ShippingAddressModel)
                .where(ShippingAddressModel.user_id == user_id)
                .order_by(ShippingAddressModel.is_default.desc(), ShippingAddressModel.id)
            ).scalars()
        )

    def get_for_user(self, address_id: int, user_id: int) -> ShippingAddressModel | None:
        return self.db.execute(
            select(ShippingAddressModel).where(
                ShippingAddressModel.id == address_id,
                ShippingAddressModel.user_id == user_id,
            )
        ).scalar_one_or_none()

    def unset_default(self, user_id: int, except_id: int | None = None) -> None:
        stmt = update(ShippingAddressModel).where(ShippingAddressModel.user_id == user_id)
        if except_id is not None:
            stmt = stmt.where(ShippingAddressModel.id != except_id)
        self.db.execute(stmt.values(is_default=False).execution_options(synchronize_session="fetch"))

    def add(self, address: ShippingAddressModel) -> ShippingAddressModel:
        self.db.add(address)
        self.db.flush()
        return address

    def delete(self, address: ShippingAddressModel) -> None:
        self.db.delete(address)
        self.db.flush()


class WishlistRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_for_user(self, user_id: int):
        return self.db.execute(
            select(WishlistModel, ProductModel, ProductImageModel.image_path)
            .join(ProductModel, WishlistModel.product_id == ProductModel.id)
            .outerjoin(ProductImageModel, _primary_image_join())
            .where(WishlistModel.user_id == user_id)
            .order_by(WishlistModel.added_at.desc(), WishlistModel.id.desc())
        ).all()

    def get_entry(self, user_id: int, product_id: int) -> WishlistModel | None:
        return self.db.execute(
            select(WishlistModel).where(
                WishlistModel.user_id == user_id,
                WishlistModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def get_for_user(self, wishlist_id: int, user_id: int) -> WishlistModel | None:
        return self.db.execute(
            select(WishlistModel).where(
                WishlistModel.id == wishlist_id,
                WishlistModel.user_id == user_id,
            )
        ).scalar_one_or_none()

    def add(self, entry: WishlistModel) -> WishlistModel:
        self.db.add(entry)
        return entry

    def delete(self, entry: WishlistModel) -> None:
        self.db.delete(entry)


class ActivityRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_page_view(self, view: PageViewModel) -> PageViewModel:
        self.db.add(view)
        return view

    def get_recent_view(self, user_id: int, product_id: int) -> RecentlyViewedModel | None:
        return self.db.execute(
            select(RecentlyViewedModel).where(
                RecentlyViewedModel.user_id == user_id,
                RecentlyViewedModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def add_recent_view(self, view: RecentlyViewedModel) -> RecentlyViewedModel:
        self.db.add(view)
        return view

    def list_recently_viewed(self, user_id: int, limit: int):
        return self.db.execute(
            select(RecentlyViewedModel, ProductModel, ProductImageModel.image_path)
            .join(ProductModel, RecentlyViewedModel.product_id == ProductModel.id)
            .outerjoin(ProductImageModel, _primary_image_join())
            .where(RecentlyViewedModel.user_id == user_id)
            .order_by(RecentlyViewedModel.viewed_at.desc(), RecentlyViewedModel.id.desc())
            .limit(limit)
        ).all()
