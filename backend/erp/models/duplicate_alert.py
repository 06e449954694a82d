from __future__ import annotations
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, DateTime, UniqueConstraint, func
from erp.models.authz import Base

class DuplicateAlert(Base):
    __tablename__ = 'duplicate_alerts'
    STATUS_OPEN = 'Open'
    STATUS_RESOLVED = 'Resolved'
    STATUS_IGNORED = 'Ignored'
    ALL_STATUSES = (STATUS_OPEN, STATUS_RESOLVED, STATUS_IGNORED)

    ENTITY_INVENTORY_ITEM = 'InventoryItem'
    ENTITY_CLIENT = 'Client'
    ENTITY_STAFF = 'Staff'
    ALL_ENTITY_TYPES = (ENTITY_INVENTORY_ITEM, ENTITY_CLIENT, ENTITY_STAFF)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    entity_type: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    # Stored sorted so (a, b) and (b, a) are the same row
    entity_id1: Mapped[str] = mapped_column(String(36), nullable=False)
    entity_id2: Mapped[str] = mapped_column(String(36), nullable=False)
    field: Mapped[str] = mapped_column(String(32), nullable=False)
    value: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=STATUS_OPEN, index=True)
    resolved_by: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), index=True)

    __table_args__ = (
        UniqueConstraint('entity_type', 'entity_id1', 'entity_id2', 'field', name='uq_duplicate_alert_pair_field'),
    )

    @property
    def key(self):
        return (self.entity_type, self.field, self.entity_id1, self.entity_id2)

# Status flow: Open -> Resolved | Ignored (both terminal)
