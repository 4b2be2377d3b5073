# app/services/catalog_service.py
import re
from typing import Any, Dict, List, Mapping

from sqlalchemy.orm import Session

from app.data.database import transaction, utcnow
from app.data.models.catalog import CategoryModel, ProductModel
from app.data.models.customer import PageViewModel, RecentlyViewedModel
from app.domain.errors import NotFoundError
from app.repos.customer_repo import ActivityRepo
from app.repos.product_repo import ProductRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

FEATURED_COUNT = 4
RECENTLY_VIEWED_LIMIT = 10
DEFAULT_MODEL_FILENAME = "default_placeholder.glb"

_MOBILE_UA = re.compile(r"mobile|android|iphone|ipod|blackberry|iemobile|opera mini", re.I)
_TABLET_UA = re.compile(r"tablet|ipad", re.I)


def _header_number(headers: Mapping[str, str], name: str, cast):
    raw = headers.get(name)
    if raw is None:
        return None
    try:
        return cast(raw)
    except ValueError:
        return None


def optimal_model_resolution(headers: Mapping[str, str]) -> str:
    """
    Picks the 3D model tier for a client from its User-Agent and the
    Device-Memory / Downlink / ECT client hints.
    """
    user_agent = headers.get("user-agent", "")
    device_memory = _header_number(headers, "device-memory", float)
    downlink = _header_number(headers, "downlink", float)
    effective_type = headers.get("ect")

    if _MOBILE_UA.search(user_agent) or effective_type in ("2g", "3g", "slow-2g"):
        return "low"
    if (
        _TABLET_UA.search(user_agent)
        or (device_memory is not None and device_memory <= 4)
        or (downlink is not None and downlink < 5)
    ):
        return "medium"
    return "high"


def default_model_path(resolution: str) -> str:
    return f"/models/{resolution}/{DEFAULT_MODEL_FILENAME}"


def device_type(user_agent: str) -> str:
    if _TABLET_UA.search(user_agent):
        return "tablet"
    if _MOBILE_UA.search(user_agent):
        return "mobile"
    return "desktop"


def _product_row(product: ProductModel, image_path: str | None = None) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "sku": product.sku,
        "price": product.price,
        "stock_quantity": product.stock_quantity,
        "low_stock_threshold": product.low_stock_threshold,
        "category_id": product.category_id,
        "image_path": image_path,
    }


class CatalogService:
    """Read-only catalog queries plus product view tracking."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProductRepo(db)
        self.activity = ActivityRepo(db)

    def list_products(self) -> List[Dict[str, Any]]:
        return [_product_row(p, img) for p, img in self.repo.list_products()]

    def featured(self) -> List[Dict[str, Any]]:
        return [_product_row(p, img) for p, img in self.repo.list_products(limit=FEATURED_COUNT)]

    def search(self, query: str) -> List[Dict[str, Any]]:
        return [_product_row(p, img) for p, img in self.repo.search(query)]

    def by_category(self, category_id: int) -> List[Dict[str, Any]]:
        return [
            _product_row(p, img)
            for p, img in self.repo.list_products(ProductModel.category_id == category_id)
        ]

    def categories(self) -> List[CategoryModel]:
        return self.repo.get_top_level_categories()

    def get_product(self, product_id: int, headers: Mapping[str, str]) -> Dict[str, Any]:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        resolution = optimal_model_resolution(headers)
        assets = self.repo.get_assets(product_id, resolution)
        images = self.repo.get_images(product_id)
        primary = next((i.image_path for i in images if i.is_primary), None)
        review_count, average = self.repo.get_rating(product_id)

        detail = _product_row(product, primary)
        detail.update(
            {
                "images": images,
                "models": assets,
                "model_resolution": resolution,
                "default_model_path": None if assets else default_model_path(resolution),
                "reviews": [
                    {
                        "id": review.id,
                        "user_id": review.user_id,
                        "username": username,
                        "rating": review.rating,
                        "comment": review.comment,
                        "created_at": review.created_at,
                    }
                    for review, username in self.repo.get_reviews(product_id)
                ],
                "review_count": review_count,
                "average_rating": round(float(average), 2) if average is not None else None,
            }
        )
        return detail

    # =====================================================
    # TRACKING
    # =====================================================
    def record_product_view(
        self,
        product_id: int,
        session_id: str,
        user_id: int | None,
        user_agent: str,
        referrer: str | None,
    ) -> None:
        """
        Page view row for every visitor, recently-viewed upsert for logged-in
        users. Analytics must not break browsing, so failures are only logged.
        """
        try:
            with transaction(self.db):
                self.activity.add_page_view(
                    PageViewModel(
                        user_id=user_id,
                        session_id=session_id,
                        page_type="product",
                        product_id=product_id,
                        device_type=device_type(user_agent),
                        referrer=referrer[:500] if referrer else None,
                    )
                )
                if user_id is not None:
                    seen = self.activity.get_recent_view(user_id, product_id)
                    if seen:
                        seen.viewed_at = utcnow()
                    else:
                        self.activity.add_recent_view(
                            RecentlyViewedModel(user_id=user_id, product_id=product_id)
                        )
        except Exception:
            logger.exception(f"Failed to record view of product {product_id}")

    def recently_viewed(self, user_id: int) -> List[Dict[str, Any]]:
        return [
            {
                "product_id": product.id,
                "name": product.name,
                "price": product.price,
                "image_path": image_path,
                "viewed_at": view.viewed_at,
            }
            for view, product, image_path in self.activity.list_recently_viewed(
                user_id, RECENTLY_VIEWED_LIMIT
            )
        ]
