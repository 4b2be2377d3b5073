# app/api/routers/wishlist.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import require_user
from app.data.database import get_db
from app.domain.errors import NotFoundError
from app.domain.schemas import SuccessOut, WishlistItemOut, WishlistToggleIn, WishlistToggleOut
from app.services.wishlist_service import WishlistService

router = APIRouter(prefix="/api/wishlist", tags=["wishlist"])


@router.get("", response_model=List[WishlistItemOut])
def list_wishlist(
    user_id: int = Depends(require_user),
    db: Session = Depends(get_db),
):
    return WishlistService(db).list_items(user_id)


@router.post("/toggle", response_model=WishlistToggleOut)
def toggle(
    payload: WishlistToggleIn,
    user_id: int = Depends(require_user),
    db: Session = Depends(get_db),
):
    svc = WishlistService(db)
    try:
        added = svc.toggle(user_id, payload.product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return WishlistToggleOut(added=added)


@router.delete("/{wishlist_id}", response_model=SuccessOut)
def remove(
    wishlist_id: int,
    user_id: int = Depends(require_user),
    db: Session = Depends(get_db),
):
    svc = WishlistService(db)
    try:
        svc.remove(user_id, wishlist_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return SuccessOut()
