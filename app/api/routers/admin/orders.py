# app/api/routers/admin/orders.py
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.data.database import get_db
from app.data.models.user import UserModel
from app.domain.errors import NotFoundError
from app.domain.schemas import (
    AdminOrderListOut,
    OrderDetailOut,
    OrderStatusIn,
    RecentOrderRow,
    SuccessOut,
)
from app.repos.listing import MAX_LIMIT, PageRequest
from app.services.order_service import OrderService

router = APIRouter(prefix="/api/admin/orders", tags=["admin-orders"])


@router.get("", response_model=AdminOrderListOut)
def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=MAX_LIMIT),
    sort: Optional[str] = None,
    direction: Optional[str] = None,
    status: Optional[str] = None,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    search: Optional[str] = None,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return OrderService(db).list_orders(
        PageRequest(page=page, limit=limit, sort=sort, direction=direction),
        status=status,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )


@router.get("/recent", response_model=List[RecentOrderRow])
def recent_orders(
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return OrderService(db).get_recent()


@router.get("/{order_id}", response_model=OrderDetailOut)
def get_order(
    order_id: int,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = OrderService(db)
    try:
        return svc.get_order(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{order_id}/status", response_model=SuccessOut)
def update_status(
    order_id: int,
    payload: OrderStatusIn,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = OrderService(db)
    try:
        svc.update_status(order_id, payload.status)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SuccessOut()
