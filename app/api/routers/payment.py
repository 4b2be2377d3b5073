# app/api/routers/payment.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import require_user
from app.data.database import get_db
from app.domain.errors import ConflictError, NotFoundError
from app.domain.schemas import OrderPlacedOut, PaymentIn
from app.services.checkout_service import CheckoutService
from app.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/payment", tags=["payment"])


@router.post("/process", response_model=OrderPlacedOut, status_code=201)
def process_payment(
    payload: PaymentIn,
    user_id: int = Depends(require_user),
    db: Session = Depends(get_db),
):
    """
    Places the order for the current cart. Either the whole order is written
    (items, stock, discount usage, emptied cart) or nothing is.
    """
    svc = CheckoutService(db)
    try:
        placed = svc.place_order(
            user_id=user_id,
            shipping_address=payload.shipping_address,
            billing_address=payload.billing_address,
            payment_method=payload.payment_method,
            discount_code=payload.discount_code,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception(f"Checkout failed for user {user_id}")
        raise HTTPException(status_code=500, detail="Failed to process payment")

    return OrderPlacedOut(
        order_id=placed.order_id,
        total_amount=placed.total_amount,
        discount_amount=placed.discount_amount,
        discount_status=placed.discount_status,
    )
