from __future__ import annotations
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Float, DateTime, func
from erp.models.authz import Base, new_id

class InventoryItem(Base):
    __tablename__ = 'inventory_items'
    STATUS_PENDING = 'Pending'
    STATUS_ACTIVE = 'Active'
    STATUS_REJECTED = 'Rejected'
    ALL_STATUSES = (STATUS_PENDING, STATUS_ACTIVE, STATUS_REJECTED)
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    unit: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    quantity: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=STATUS_ACTIVE, index=True)
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
