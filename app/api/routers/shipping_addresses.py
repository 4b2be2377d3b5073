# app/api/routers/shipping_addresses.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import require_user
from app.data.database import get_db
from app.domain.errors import NotFoundError
from app.domain.schemas import AddressCreatedOut, AddressIn, AddressOut, SuccessOut
from app.services.address_service import AddressService

router = APIRouter(prefix="/api/shipping-addresses", tags=["shipping-addresses"])


@router.get("", response_model=List[AddressOut])
def list_addresses(
    user_id: int = Depends(require_user),
    db: Session = Depends(get_db),
):
    return AddressService(db).list_addresses(user_id)


@router.post("", response_model=AddressCreatedOut, status_code=201)
def add_address(
    payload: AddressIn,
    user_id: int = Depends(require_user),
    db: Session = Depends(get_db),
):
    address = AddressService(db).add_address(user_id, payload)
    return AddressCreatedOut(address_id=address.id)


@router.put("/{address_id}", response_model=AddressOut)
def update_address(
    address_id: int,
    payload: AddressIn,
    user_id: int = Depends(require_user),
    db: Session = Depends(get_db),
):
    svc = AddressService(db)
    try:
        return svc.update_address(user_id, address_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{address_id}/default", response_model=AddressOut)
def set_default(
    address_id: int,
    user_id: int = Depends(require_user),
    db: Session = Depends(get_db),
):
    svc = AddressService(db)
    try:
        return svc.set_default(user_id, address_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{address_id}", response_model=SuccessOut)
def delete_address(
    address_id: int,
    user_id: int = Depends(require_user),
    db: Session = Depends(get_db),
):
    svc = AddressService(db)
    try:
        svc.delete_address(user_id, address_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return SuccessOut()
