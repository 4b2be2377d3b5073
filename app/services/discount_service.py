# app/services/discount_service.py
from dataclasses import dataclass
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from app.data.database import transaction, utcnow
from app.data.models.discount_code import DiscountCodeModel
from app.domain.errors import ConflictError, NotFoundError
from app.domain.pricing import ZERO, discount_for, to_money
from app.domain.schemas import DiscountCreateIn, DiscountUpdateIn
from app.repos.discount_repo import DiscountRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

APPLIED = "applied"
NOT_PROVIDED = "not_provided"
INVALID = "invalid"
BELOW_MINIMUM = "below_minimum"


@dataclass(frozen=True)
class DiscountResolution:
    status: str
    amount: Decimal = ZERO
    code_id: int | None = None
    code: str | None = None

    @property
    def applied(self) -> bool:
        return self.status == APPLIED


class DiscountService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = DiscountRepo(db)

    # =====================================================
    # CHECKOUT
    # =====================================================
    def resolve(self, code: str | None, subtotal: Decimal) -> DiscountResolution:
        """
        Looks up a currently valid code and prices it against the subtotal.
        An unusable code degrades to no discount; the status says why.
        """
        if not code:
            return DiscountResolution(NOT_PROVIDED)

        discount = self.repo.get_valid_code(code, utcnow())
        if not discount:
            logger.info(f"Discount code {code!r} is unknown, expired or used up")
            return DiscountResolution(INVALID, code=code)

        if subtotal < to_money(discount.minimum_order_amount):
            logger.info(
                f"Discount code {code!r} needs {discount.minimum_order_amount}, cart has {subtotal}"
            )
            return DiscountResolution(BELOW_MINIMUM, code_id=discount.id, code=code)

        amount = discount_for(subtotal, discount.discount_percent, discount.discount_amount)
        return DiscountResolution(APPLIED, amount=amount, code_id=discount.id, code=code)

    # =====================================================
    # ADMIN
    # =====================================================
    def list_codes(self) -> List[DiscountCodeModel]:
        return self.repo.list_codes()

    def create_code(self, payload: DiscountCreateIn) -> DiscountCodeModel:
        if payload.discount_percent is None and payload.discount_amount is None:
            raise ValueError("Either discount_percent or discount_amount is required")

        if self.repo.get_by_code(payload.code):
            raise ConflictError(f"Discount code {payload.code} already exists")

        max_uses = payload.max_uses
        if payload.is_single_use and max_uses is None:
            max_uses = 1

        with transaction(self.db):
            discount = self.repo.add(
                DiscountCodeModel(
                    code=payload.code,
                    discount_percent=payload.discount_percent,
                    discount_amount=payload.discount_amount,
                    minimum_order_amount=payload.minimum_order_amount,
                    valid_from=payload.valid_from or utcnow(),
                    valid_to=payload.valid_to,
                    is_single_use=payload.is_single_use,
                    max_uses=max_uses,
                )
            )

        logger.info(f"Created discount code {discount.code} ({discount.id})")
        return discount

    def update_code(self, code_id: int, payload: DiscountUpdateIn) -> DiscountCodeModel:
        discount = self.repo.get(code_id)
        if not discount:
            raise NotFoundError("Discount code not found")

        max_uses = payload.max_uses
        if payload.is_single_use and max_uses is None:
            max_uses = 1

        with transaction(self.db):
            discount.valid_to = payload.valid_to
            discount.is_single_use = payload.is_single_use
            discount.max_uses = max_uses
            if payload.minimum_order_amount is not None:
                discount.minimum_order_amount = payload.minimum_order_amount

        logger.info(f"Updated discount code {code_id}")
        return discount

    def delete_code(self, code_id: int) -> None:
        discount = self.repo.get(code_id)
        if not discount:
            raise NotFoundError("Discount code not found")

        with transaction(self.db):
            self.repo.delete(discount)

        logger.info(f"Deleted discount code {code_id}")
