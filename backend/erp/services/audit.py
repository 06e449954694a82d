from __future__ import annotations
from typing import Any, Dict, Optional
from sqlalchemy.orm import Session
from erp.models.audit import AuditLog
from erp.services.policy import Actor


def add_audit(session: Session, actor: Actor, action: str, entity: Optional[str] = None, entity_id: Optional[Any] = None, meta: Optional[Dict[str, Any]] = None):
    """Persist an audit log entry within the given DB session.

    Parameters:
      action: short action code e.g. DUPLICATES.SCAN, DUPLICATES.RESOLVE
      entity: optional entity name (DuplicateAlert, User, etc.)
      entity_id: optional primary key, stored as string
      meta: additional JSON-safe dictionary (will be shallow copied)
    """
    log = AuditLog(
        actor_name=actor.display_name,
        actor_role=actor.role,
        action=action,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        meta=dict(meta or {}),
    )
    session.add(log)
    # No commit here; caller's transaction boundary controls durability.
    return log
