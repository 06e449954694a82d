from __future__ import annotations
"""Duplicate entity detection and the alert triage queue.

The grouping half (normalize / group_duplicates / candidate_pairs /
detect_candidates) is pure and works on plain dict snapshots. The service half
(scan, list_alerts, resolve, ignore, ...) gates on manage_system_settings,
diffs candidates against persisted alerts and writes through an entity store
(see erp.services.store.SqlEntityStore).
"""
import logging
from dataclasses import dataclass, field as dataclass_field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple
from sqlalchemy.exc import SQLAlchemyError
from erp.config.pagination import normalize_page, total_pages
from erp.constants.permissions import MANAGE_SYSTEM_SETTINGS
from erp.errors import NotFoundError, ValidationError
from erp.models.duplicate_alert import DuplicateAlert
from erp.services.audit import add_audit
from erp.services.policy import Actor, check_permission, has_permission
from erp.utils.fsm import TransitionValidator
from erp.utils.validation import optional_status_filter

logger = logging.getLogger(__name__)

ALERT_FSM = TransitionValidator({
    DuplicateAlert.STATUS_OPEN: {DuplicateAlert.STATUS_RESOLVED, DuplicateAlert.STATUS_IGNORED},
    DuplicateAlert.STATUS_RESOLVED: set(),
    DuplicateAlert.STATUS_IGNORED: set(),
})


@dataclass(frozen=True)
class ScanTarget:
    entity_type: str
    field: str
    case_insensitive: bool


SCAN_TARGETS: Tuple[ScanTarget, ...] = (
    ScanTarget(DuplicateAlert.ENTITY_INVENTORY_ITEM, 'name', True),
    ScanTarget(DuplicateAlert.ENTITY_CLIENT, 'name', True),
    ScanTarget(DuplicateAlert.ENTITY_CLIENT, 'phone', False),
    ScanTarget(DuplicateAlert.ENTITY_CLIENT, 'email', True),
    ScanTarget(DuplicateAlert.ENTITY_STAFF, 'email', True),
    ScanTarget(DuplicateAlert.ENTITY_STAFF, 'phone', False),
)


@dataclass
class DuplicateGroup:
    field: str
    value: str  # first-seen original value, kept for display
    ids: List[str] = dataclass_field(default_factory=list)


@dataclass(frozen=True)
class Candidate:
    entity_type: str
    field: str
    entity_id1: str
    entity_id2: str
    value: str

    @property
    def key(self):
        return (self.entity_type, self.field, self.entity_id1, self.entity_id2)


def normalize(value: Any, case_insensitive: bool) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text.casefold() if case_insensitive else text


def group_duplicates(records: Iterable[Mapping[str, Any]], field_name: str, case_insensitive: bool) -> List[DuplicateGroup]:
    """Group records by the normalized value of field_name; keep groups of 2+."""
    groups: Dict[str, DuplicateGroup] = {}
    for rec in records:
        key = normalize(rec.get(field_name), case_insensitive)
        if key is None:
            continue
        group = groups.get(key)
        if group is None:
            group = groups[key] = DuplicateGroup(field=field_name, value=str(rec[field_name]).strip())
        if rec['id'] not in group.ids:
            group.ids.append(rec['id'])
    return [g for g in groups.values() if len(g.ids) > 1]


def candidate_pairs(group: DuplicateGroup) -> List[Tuple[str, str]]:
    pairs = []
    for i, first in enumerate(group.ids):
        for second in group.ids[i + 1:]:
            pairs.append(tuple(sorted((first, second))))
    return pairs


def detect_candidates(snapshots: Mapping[str, List[Mapping[str, Any]]], targets: Iterable[ScanTarget] = SCAN_TARGETS) -> List[Candidate]:
    """Map entity snapshots (keyed by entity type) to candidate duplicate pairs."""
    out: List[Candidate] = []
    for target in targets:
        records = snapshots.get(target.entity_type, [])
        for group in group_duplicates(records, target.field, target.case_insensitive):
            for id1, id2 in candidate_pairs(group):
                out.append(Candidate(target.entity_type, target.field, id1, id2, group.value))
    return out


def fetch_snapshots(store) -> Dict[str, List[Dict[str, Any]]]:
    fetchers: Dict[str, Callable[[], List[Dict[str, Any]]]] = {
        DuplicateAlert.ENTITY_INVENTORY_ITEM: store.fetch_inventory_items,
        DuplicateAlert.ENTITY_CLIENT: store.fetch_clients,
        DuplicateAlert.ENTITY_STAFF: store.fetch_staff,
    }
    return {entity_type: fetch() for entity_type, fetch in fetchers.items()}


def scan(actor: Actor, store) -> Dict[str, int]:
    check_permission(actor.role, MANAGE_SYSTEM_SETTINGS)
    candidates = detect_candidates(fetch_snapshots(store))
    # Any existing record blocks re-creation, whatever its status
    existing = store.existing_alert_keys()
    new_alerts = []
    for cand in candidates:
        if cand.key in existing:
            continue
        existing.add(cand.key)
        new_alerts.append(DuplicateAlert(
            entity_type=cand.entity_type,
            entity_id1=cand.entity_id1,
            entity_id2=cand.entity_id2,
            field=cand.field,
            value=cand.value,
            status=DuplicateAlert.STATUS_OPEN,
        ))
    # One commit per pair: a pair recorded meanwhile by another scan is skipped, not fatal
    created = 0
    try:
        for alert in new_alerts:
            if store.insert_alert(alert):
                created += 1
            else:
                logger.info('duplicate alert %s already recorded concurrently', alert.key)
        add_audit(store.session, actor, 'DUPLICATES.SCAN', entity='DuplicateAlert', meta={
            'candidates': len(candidates),
            'alerts_created': created,
        })
        store.commit()
    except SQLAlchemyError:
        store.rollback()
        raise
    logger.info('duplicate scan by %s: %d candidates, %d new alerts', actor.display_name, len(candidates), created)
    return {'alerts_created': created}


def list_alerts(actor: Actor, store, status: Optional[str] = None, page: Any = 1, limit: Any = None) -> Dict[str, Any]:
    check_permission(actor.role, MANAGE_SYSTEM_SETTINGS)
    status = optional_status_filter(status, DuplicateAlert.ALL_STATUSES)
    try:
        page, limit, offset = normalize_page(page, limit)
    except ValueError as e:
        raise ValidationError(str(e))
    total = store.count_alerts(status)
    rows = store.query_alerts(status, offset, limit)
    return {
        'data': rows,
        'pagination': {
            'page': page,
            'limit': limit,
            'total': total,
            'total_pages': total_pages(total, limit),
            'returned': len(rows),
        },
    }


def open_alert_count(actor: Actor, store) -> int:
    """Badge count of Open alerts; degrades to 0 instead of failing the page."""
    if not actor.role or not has_permission(actor.role, MANAGE_SYSTEM_SETTINGS):
        return 0
    try:
        return store.count_alerts(DuplicateAlert.STATUS_OPEN)
    except SQLAlchemyError:
        logger.warning('open duplicate alert count unavailable', exc_info=True)
        store.rollback()
        return 0


def _get_alert_or_404(store, alert_id: int) -> DuplicateAlert:
    alert = store.get_alert(alert_id)
    if alert is None:
        raise NotFoundError(f'Duplicate alert {alert_id} not found')
    return alert


def _close_alert(actor: Actor, store, alert_id: int, target_status: str, action: str) -> DuplicateAlert:
    check_permission(actor.role, MANAGE_SYSTEM_SETTINGS)
    alert = _get_alert_or_404(store, alert_id)
    before = alert.status
    ALERT_FSM.assert_can_transition(before, target_status)
    alert.status = target_status
    alert.resolved_by = actor.display_name
    alert.resolved_at = datetime.now(timezone.utc)
    try:
        add_audit(store.session, actor, action, entity='DuplicateAlert', entity_id=alert.id, meta={
            'changes': {'status': {'before': before, 'after': target_status}},
        })
        store.commit()
    except SQLAlchemyError:
        store.rollback()
        raise
    logger.info('duplicate alert %s %s by %s', alert.id, target_status.lower(), actor.display_name)
    return alert


def resolve(actor: Actor, store, alert_id: int) -> DuplicateAlert:
    return _close_alert(actor, store, alert_id, DuplicateAlert.STATUS_RESOLVED, 'DUPLICATES.RESOLVE')


def ignore(actor: Actor, store, alert_id: int) -> DuplicateAlert:
    return _close_alert(actor, store, alert_id, DuplicateAlert.STATUS_IGNORED, 'DUPLICATES.IGNORE')


def compare_entities(actor: Actor, store, alert_id: int) -> Dict[str, Any]:
    """Alert plus both entity snapshots for side-by-side review."""
    check_permission(actor.role, MANAGE_SYSTEM_SETTINGS)
    alert = _get_alert_or_404(store, alert_id)
    return {
        'alert': alert,
        'entity1': store.get_entity(alert.entity_type, alert.entity_id1),
        'entity2': store.get_entity(alert.entity_type, alert.entity_id2),
    }


def alert_json(a: DuplicateAlert) -> Dict[str, Any]:
    return {
        'id': a.id,
        'entity_type': a.entity_type,
        'entity_id1': a.entity_id1,
        'entity_id2': a.entity_id2,
        'field': a.field,
        'value': a.value,
        'status': a.status,
        'resolved_by': a.resolved_by,
        'resolved_at': a.resolved_at.isoformat() if a.resolved_at else None,
        'created_at': a.created_at.isoformat() if a.created_at else None,
    }

__all__ = [
    'ALERT_FSM', 'SCAN_TARGETS', 'ScanTarget', 'DuplicateGroup', 'Candidate', 'normalize',
    'group_duplicates', 'candidate_pairs', 'detect_candidates', 'fetch_snapshots', 'scan',
    'list_alerts', 'open_alert_count', 'resolve', 'ignore', 'compare_entities', 'alert_json',
]
