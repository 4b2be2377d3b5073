# app/api/routers/admin/inventory.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from app.api.deps import client_ip, require_admin
from app.data.database import get_db
from app.data.models.user import UserModel
from app.domain.errors import NotFoundError
from app.domain.schemas import (
    BulkStockIn,
    BulkStockOut,
    InventoryListOut,
    InventoryLogOut,
    InventoryProductRow,
    ProductEditIn,
    ProductOut,
    StockChangedOut,
    StockIn,
)
from app.repos.listing import MAX_LIMIT, PageRequest
from app.services.inventory_service import InventoryService

router = APIRouter(prefix="/api/admin/inventory", tags=["admin-inventory"])


@router.get("/products", response_model=InventoryListOut)
def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=MAX_LIMIT),
    sort: Optional[str] = None,
    direction: Optional[str] = None,
    category_id: Optional[int] = None,
    max_stock: Optional[int] = None,
    low_stock: bool = False,
    search: Optional[str] = None,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return InventoryService(db).list_products(
        PageRequest(page=page, limit=limit, sort=sort, direction=direction),
        category_id=category_id,
        max_stock=max_stock,
        low_stock=low_stock,
        search=search,
    )


@router.get("/low-stock", response_model=List[InventoryProductRow])
def low_stock(
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return InventoryService(db).low_stock()


@router.put("/products/{product_id}/stock", response_model=StockChangedOut)
def set_stock(
    product_id: int,
    payload: StockIn,
    request: Request,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = InventoryService(db)
    try:
        result = svc.set_stock(
            product_id,
            payload.stock_quantity,
            reason=payload.reason,
            admin_id=admin.id,
            ip_address=client_ip(request),
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return StockChangedOut(**result)


@router.put("/products/{product_id}", response_model=ProductOut)
def edit_product(
    product_id: int,
    payload: ProductEditIn,
    request: Request,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = InventoryService(db)
    try:
        return svc.edit_product(product_id, payload, admin_id=admin.id, ip_address=client_ip(request))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/bulk-update", response_model=BulkStockOut)
def bulk_update(
    payload: BulkStockIn,
    request: Request,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    All-or-nothing: an unknown product or a bad quantity leaves every
    product untouched.
    """
    svc = InventoryService(db)
    try:
        updated = svc.bulk_set_stock(
            [(line.product_id, line.stock_quantity) for line in payload.updates],
            admin_id=admin.id,
            ip_address=client_ip(request),
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return BulkStockOut(updated=updated)


@router.get("/products/{product_id}/log", response_model=List[InventoryLogOut])
def product_log(
    product_id: int,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = InventoryService(db)
    try:
        return svc.product_log(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
