from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String

from app.data.database import Base, utcnow


class DiscountCodeModel(Base):
    __tablename__ = "discount_codes"

    id = Column(Integer, primary_key=True)
    code = Column(String(50), nullable=False, unique=True)

    # percent wins when both are set
    discount_percent = Column(Numeric(5, 2))
    discount_amount = Column(Numeric(10, 2))
    minimum_order_amount = Column(Numeric(10, 2), nullable=False, default=0)

    valid_from = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    valid_to = Column(DateTime(timezone=True))
    is_single_use = Column(Boolean, nullable=False, default=False)
    max_uses = Column(Integer)
    times_used = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
