# app/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.api.deps import get_web_session, require_user
from app.data.database import get_db
from app.domain.errors import NotFoundError
from app.domain.schemas import CategoryOut, ProductDetailOut, ProductOut, RecentlyViewedOut
from app.services.catalog_service import CatalogService
from app.services.session_store import WebSession

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=List[ProductOut])
def list_products(db: Session = Depends(get_db)):
    return CatalogService(db).list_products()


@router.get("/featured", response_model=List[ProductOut])
def featured_products(db: Session = Depends(get_db)):
    return CatalogService(db).featured()


@router.get("/categories", response_model=List[CategoryOut])
def categories(db: Session = Depends(get_db)):
    return CatalogService(db).categories()


@router.get("/recently-viewed", response_model=List[RecentlyViewedOut])
def recently_viewed(
    user_id: int = Depends(require_user),
    db: Session = Depends(get_db),
):
    return CatalogService(db).recently_viewed(user_id)


@router.get("/search/{query}", response_model=List[ProductOut])
def search_products(query: str, db: Session = Depends(get_db)):
    return CatalogService(db).search(query)


@router.get("/category/{category_id}", response_model=List[ProductOut])
def products_by_category(category_id: int, db: Session = Depends(get_db)):
    return CatalogService(db).by_category(category_id)


@router.get("/{product_id}", response_model=ProductDetailOut)
def get_product(
    product_id: int,
    request: Request,
    db: Session = Depends(get_db),
    session: WebSession = Depends(get_web_session),
):
    """
    Product detail with the 3D models matching the client's capabilities.
    The view is recorded for analytics and recently viewed.
    """
    svc = CatalogService(db)
    try:
        detail = svc.get_product(product_id, request.headers)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    svc.record_product_view(
        product_id,
        session.id,
        session.user_id,
        request.headers.get("user-agent", ""),
        request.headers.get("referer"),
    )
    return detail
