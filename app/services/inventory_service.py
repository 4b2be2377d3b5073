# app/services/inventory_service.py
from typing import Any, Dict, Iterable, List, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.data.database import transaction
from app.data.models.catalog import CategoryModel, ProductModel
from app.data.models.inventory import AdminLogModel, InventoryLogModel
from app.domain.errors import InvalidQuantityError, NotFoundError
from app.domain.schemas import ProductEditIn
from app.repos.inventory_repo import InventoryRepo
from app.repos.listing import PageRequest, contains, paginate
from app.repos.product_repo import ProductRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

MANUAL_ADJUSTMENT = "manual_adjustment"
ADJUSTMENT = "adjustment"
BULK_ADJUSTMENT = "bulk_adjustment"

INVENTORY_SORTS = {
    "stock_quantity": ProductModel.stock_quantity,
    "name": ProductModel.name,
    "price": ProductModel.price,
    "created_at": ProductModel.created_at,
    "category": CategoryModel.name,
}


def _validate_quantity(quantity) -> int:
    # bool is an int subclass but never a valid stock level
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
        raise InvalidQuantityError("Stock quantity must be a non-negative integer")
    return quantity


class InventoryService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = InventoryRepo(db)
        self.products = ProductRepo(db)

    def _get_product(self, product_id: int) -> ProductModel:
        product = self.products.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def _apply_stock(self, product: ProductModel, new_quantity: int, reason: str, admin_id: int | None) -> int:
        delta = new_quantity - product.stock_quantity
        product.stock_quantity = new_quantity
        self.repo.add_log(
            InventoryLogModel(
                product_id=product.id,
                quantity_change=delta,
                reason=reason,
                admin_user_id=admin_id,
            )
        )
        return delta

    # =====================================================
    # COMMANDS
    # =====================================================
    def set_stock(
        self,
        product_id: int,
        new_quantity: int,
        reason: str | None = None,
        admin_id: int | None = None,
        ip_address: str | None = None,
    ) -> Dict[str, Any]:
        """
        Sets an absolute stock level and records the delta against the
        previous level. Repeating the same level logs a zero delta.
        """
        new_quantity = _validate_quantity(new_quantity)
        product = self._get_product(product_id)
        reason = reason or MANUAL_ADJUSTMENT

        with transaction(self.db):
            delta = self._apply_stock(product, new_quantity, reason, admin_id)
            if admin_id is not None:
                self.repo.add_admin_log(
                    AdminLogModel(
                        admin_id=admin_id,
                        action_type="stock_update",
                        action_details=f"Set stock of product {product_id} to {new_quantity} ({delta:+d})",
                        ip_address=ip_address,
                    )
                )

        logger.info(f"Stock of product {product_id} set to {new_quantity} (delta {delta:+d}, {reason})")
        return {"product_id": product_id, "stock_quantity": new_quantity, "delta": delta}

    def edit_product(
        self,
        product_id: int,
        payload: ProductEditIn,
        admin_id: int | None = None,
        ip_address: str | None = None,
    ) -> ProductModel:
        if payload.stock_quantity is not None:
            _validate_quantity(payload.stock_quantity)
        product = self._get_product(product_id)

        with transaction(self.db):
            if payload.stock_quantity is not None:
                self._apply_stock(product, payload.stock_quantity, ADJUSTMENT, admin_id)
            if payload.low_stock_threshold is not None:
                product.low_stock_threshold = payload.low_stock_threshold
            if payload.price is not None:
                product.price = payload.price
            if admin_id is not None:
                self.repo.add_admin_log(
                    AdminLogModel(
                        admin_id=admin_id,
                        action_type="product_edit",
                        action_details=f"Updated product {product_id}",
                        ip_address=ip_address,
                    )
                )

        logger.info(f"Product {product_id} edited by admin {admin_id}")
        return product

    def bulk_set_stock(
        self,
        updates: Iterable[Tuple[int, int]],
        admin_id: int | None = None,
        ip_address: str | None = None,
    ) -> int:
        """(product_id, stock_quantity) pairs; one bad entry rolls back the batch."""
        updates = list(updates)

        with transaction(self.db):
            for product_id, quantity in updates:
                _validate_quantity(quantity)
                product = self._get_product(product_id)
                self._apply_stock(product, quantity, BULK_ADJUSTMENT, admin_id)
            if admin_id is not None:
                self.repo.add_admin_log(
                    AdminLogModel(
                        admin_id=admin_id,
                        action_type="bulk_stock_update",
                        action_details=f"Updated {len(updates)} products",
                        ip_address=ip_address,
                    )
                )

        logger.info(f"Bulk stock update of {len(updates)} products by admin {admin_id}")
        return len(updates)

    # =====================================================
    # QUERY
    # =====================================================
    def list_products(
        self,
        request: PageRequest,
        category_id: int | None = None,
        max_stock: int | None = None,
        low_stock: bool = False,
        search: str | None = None,
    ) -> Dict[str, Any]:
        filters = []
        if category_id is not None:
            filters.append(ProductModel.category_id == category_id)
        if max_stock is not None:
            filters.append(ProductModel.stock_quantity <= max_stock)
        if low_stock:
            filters.append(ProductModel.stock_quantity <= ProductModel.low_stock_threshold)
        if search:
            pattern = contains(search)
            filters.append(
                or_(
                    ProductModel.name.ilike(pattern, escape="\\"),
                    ProductModel.description.ilike(pattern, escape="\\"),
                    ProductModel.sku.ilike(pattern, escape="\\"),
                )
            )

        page = paginate(
            self.db,
            self.repo.inventory_list_base(),
            filters,
            request,
            INVENTORY_SORTS,
            default_sort="stock_quantity",
            default_direction="ASC",
            tiebreaker=ProductModel.id,
        )

        return {
            "products": [_inventory_row(product, category_name) for product, category_name in page.rows],
            "pagination": page.pagination(),
        }

    def low_stock(self) -> List[Dict[str, Any]]:
        return [_inventory_row(product, category_name) for product, category_name in self.products.get_low_stock()]

    def product_log(self, product_id: int) -> List[InventoryLogModel]:
        self._get_product(product_id)
        return self.repo.get_product_log(product_id)


def _inventory_row(product: ProductModel, category_name: str | None) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "sku": product.sku,
        "price": product.price,
        "stock_quantity": product.stock_quantity,
        "low_stock_threshold": product.low_stock_threshold,
        "category_id": product.category_id,
        "category_name": category_name,
    }
