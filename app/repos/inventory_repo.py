# app/repos/inventory_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.data.models.catalog import CategoryModel, ProductModel
from app.data.models.inventory import AdminLogModel, InventoryLogModel


class InventoryRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_log(self, entry: InventoryLogModel) -> InventoryLogModel:
        self.db.add(entry)
        return entry

    def add_admin_log(self, entry: AdminLogModel) -> AdminLogModel:
        self.db.add(entry)
        return entry

    def get_product_log(self, product_id: int) -> List[InventoryLogModel]:
        return list(
            self.db.execute(
                select(InventoryLogModel)
                .where(InventoryLogModel.product_id == product_id)
                .order_by(InventoryLogModel.created_at.desc(), InventoryLogModel.id.desc())
            ).scalars()
        )

    def inventory_list_base(self):
        return select(ProductModel, CategoryModel.name.label("category_name")).outerjoin(
            CategoryModel, ProductModel.category_id == CategoryModel.id
        )
