from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from app.data.database import Base, utcnow


class InventoryLogModel(Base):
    """Append-only ledger of stock changes."""

    __tablename__ = "inventory_log"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity_change = Column(Integer, nullable=False)
    reason = Column(String(50), nullable=False)
    reference_id = Column(String(100))
    admin_user_id = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class AdminLogModel(Base):
    __tablename__ = "admin_log"

    id = Column(Integer, primary_key=True)
    admin_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    action_type = Column(String(50), nullable=False)
    action_details = Column(Text)
    ip_address = Column(String(64))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
