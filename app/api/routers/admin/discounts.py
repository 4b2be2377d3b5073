# app/api/routers/admin/discounts.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.data.database import get_db
from app.data.models.user import UserModel
from app.domain.errors import ConflictError, NotFoundError
from app.domain.schemas import (
    DiscountCreateIn,
    DiscountCreatedOut,
    DiscountOut,
    DiscountUpdateIn,
    SuccessOut,
)
from app.services.discount_service import DiscountService

router = APIRouter(prefix="/api/admin/discounts", tags=["admin-discounts"])


@router.get("", response_model=List[DiscountOut])
def list_discounts(
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return DiscountService(db).list_codes()


@router.post("", response_model=DiscountCreatedOut, status_code=201)
def create_discount(
    payload: DiscountCreateIn,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = DiscountService(db)
    try:
        discount = svc.create_code(payload)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return DiscountCreatedOut(code_id=discount.id)


@router.put("/{code_id}", response_model=DiscountOut)
def update_discount(
    code_id: int,
    payload: DiscountUpdateIn,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = DiscountService(db)
    try:
        return svc.update_code(code_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{code_id}", response_model=SuccessOut)
def delete_discount(
    code_id: int,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = DiscountService(db)
    try:
        svc.delete_code(code_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return SuccessOut()
