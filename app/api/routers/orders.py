# app/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import require_user
from app.data.database import get_db
from app.domain.errors import NotFoundError
from app.domain.schemas import OrderDetailOut, OrderSummaryOut
from app.services.order_service import OrderService

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("", response_model=List[OrderSummaryOut])
def list_orders(
    user_id: int = Depends(require_user),
    db: Session = Depends(get_db),
):
    return OrderService(db).get_user_orders(user_id)


@router.get("/{order_id}", response_model=OrderDetailOut)
def get_order(
    order_id: int,
    user_id: int = Depends(require_user),
    db: Session = Depends(get_db),
):
    """
    Order with its lines, as frozen at checkout.
    """
    svc = OrderService(db)
    try:
        return svc.get_user_order(order_id, user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
