# app/api/routers/cart.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import get_web_session
from app.data.database import get_db
from app.domain.errors import NotFoundError
from app.domain.schemas import CartChangedOut, CartOut, ItemIn, QuantityIn, SuccessOut
from app.services.cart_service import CartService
from app.services.session_store import WebSession

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("", response_model=CartOut)
def get_cart(
    db: Session = Depends(get_db),
    session: WebSession = Depends(get_web_session),
):
    return CartService(db).get_cart(session.user_id, session.id)


@router.post("/add", response_model=CartChangedOut)
def add_item(
    payload: ItemIn,
    db: Session = Depends(get_db),
    session: WebSession = Depends(get_web_session),
):
    svc = CartService(db)
    try:
        cart_id = svc.add_product(session.user_id, session.id, payload.product_id, payload.quantity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CartChangedOut(cart_id=cart_id)


@router.put("/update/{item_id}", response_model=SuccessOut)
def update_item(
    item_id: int,
    payload: QuantityIn,
    db: Session = Depends(get_db),
    session: WebSession = Depends(get_web_session),
):
    svc = CartService(db)
    try:
        svc.update_quantity(session.user_id, session.id, item_id, payload.quantity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SuccessOut()


@router.delete("/remove/{item_id}", response_model=SuccessOut)
def remove_item(
    item_id: int,
    db: Session = Depends(get_db),
    session: WebSession = Depends(get_web_session),
):
    svc = CartService(db)
    try:
        svc.remove_item(session.user_id, session.id, item_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return SuccessOut()


@router.delete("/clear", response_model=SuccessOut)
def clear_cart(
    db: Session = Depends(get_db),
    session: WebSession = Depends(get_web_session),
):
    svc = CartService(db)
    try:
        svc.clear(session.user_id, session.id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return SuccessOut()
