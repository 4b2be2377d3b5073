# app/repos/discount_repo.py
from datetime import datetime
from typing import List

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session

from app.data.models.discount_code import DiscountCodeModel


class DiscountRepo:
    def __init__(self, db: Session):
        self.db = db

    def get(self, code_id: int) -> DiscountCodeModel | None:
        return self.db.get(DiscountCodeModel, code_id)

    def get_by_code(self, code: str) -> DiscountCodeModel | None:
        return self.db.execute(
            select(DiscountCodeModel).where(DiscountCodeModel.code == code)
        ).scalar_one_or_none()

    def get_valid_code(self, code: str, now: datetime) -> DiscountCodeModel | None:
        """Exact-match code inside its validity window with uses left."""
        return self.db.execute(
            select(DiscountCodeModel).where(
                DiscountCodeModel.code == code,
                DiscountCodeModel.valid_from <= now,
                or_(DiscountCodeModel.valid_to.is_(None), DiscountCodeModel.valid_to >= now),
                or_(
                    DiscountCodeModel.max_uses.is_(None),
                    DiscountCodeModel.times_used < DiscountCodeModel.max_uses,
                ),
            )
        ).scalar_one_or_none()

    def list_codes(self) -> List[DiscountCodeModel]:
        return list(
            self.db.execute(
                select(DiscountCodeModel).order_by(
                    DiscountCodeModel.created_at.desc(), DiscountCodeModel.id.desc()
                )
            ).scalars()
        )

    def add(self, discount: DiscountCodeModel) -> DiscountCodeModel:
        self.db.add(discount)
        self.db.flush()
        return discount

    def delete(self, discount: DiscountCodeModel) -> None:
        self.db.delete(discount)

    def increment_usage(self, code_id: int) -> bool:
        """Counts one use unless the cap was reached in the meantime."""
        result = self.db.execute(
            update(DiscountCodeModel)
            .where(
                DiscountCodeModel.id == code_id,
                or_(
                    DiscountCodeModel.max_uses.is_(None),
                    DiscountCodeModel.times_used < DiscountCodeModel.max_uses,
                ),
            )
            .values(times_used=DiscountCodeModel.times_used + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
