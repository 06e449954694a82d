from __future__ import annotations
"""SQLAlchemy-backed entity store consumed by the duplicate detector."""
from typing import Any, Dict, List, Optional, Set, Tuple
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from erp.models.client import Client
from erp.models.duplicate_alert import DuplicateAlert
from erp.models.inventory_item import InventoryItem
from erp.models.staff import Staff

ENTITY_MODELS = {
    DuplicateAlert.ENTITY_INVENTORY_ITEM: InventoryItem,
    DuplicateAlert.ENTITY_CLIENT: Client,
    DuplicateAlert.ENTITY_STAFF: Staff,
}

AlertKey = Tuple[str, str, str, str]


def _snapshot(obj) -> Dict[str, Any]:
    return {c.key: getattr(obj, c.key) for c in obj.__table__.columns}


class SqlEntityStore:
    def __init__(self, session: Session):
        self.session = session

    # --- entity snapshots ---
    def fetch_inventory_items(self) -> List[Dict[str, Any]]:
        q = select(InventoryItem.id, InventoryItem.name).where(InventoryItem.status != InventoryItem.STATUS_REJECTED)
        return [dict(r) for r in self.session.execute(q).mappings()]

    def fetch_clients(self) -> List[Dict[str, Any]]:
        q = select(Client.id, Client.name, Client.phone, Client.email)
        return [dict(r) for r in self.session.execute(q).mappings()]

    def fetch_staff(self) -> List[Dict[str, Any]]:
        q = select(Staff.id, Staff.name, Staff.email, Staff.phone)
        return [dict(r) for r in self.session.execute(q).mappings()]

    def get_entity(self, entity_type: str, entity_id: str) -> Optional[Dict[str, Any]]:
        model = ENTITY_MODELS.get(entity_type)
        if model is None:
            return None
        obj = self.session.get(model, entity_id)
        return _snapshot(obj) if obj is not None else None

    # --- alerts ---
    def existing_alert_keys(self) -> Set[AlertKey]:
        q = select(DuplicateAlert.entity_type, DuplicateAlert.field, DuplicateAlert.entity_id1, DuplicateAlert.entity_id2)
        return {tuple(r) for r in self.session.execute(q)}

    def insert_alert(self, alert: DuplicateAlert) -> bool:
        """Insert and commit one alert; False when the pair+field is already recorded."""
        self.session.add(alert)
        try:
            self.commit()
        except IntegrityError:
            self.rollback()
            return False
        return True

    def get_alert(self, alert_id: int) -> Optional[DuplicateAlert]:
        return self.session.get(DuplicateAlert, alert_id)

    def _filtered(self, q, status: Optional[str]):
        if status:
            q = q.where(DuplicateAlert.status == status)
        return q

    def query_alerts(self, status: Optional[str], offset: int, limit: int) -> List[DuplicateAlert]:
        q = self._filtered(select(DuplicateAlert), status)
        q = q.order_by(DuplicateAlert.created_at.desc(), DuplicateAlert.id.desc()).offset(offset).limit(limit)
        return list(self.session.execute(q).scalars())

    def count_alerts(self, status: Optional[str] = None) -> int:
        q = self._filtered(select(func.count(DuplicateAlert.id)), status)
        return self.session.execute(q).scalar_one()

    # --- transaction boundary ---
    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
