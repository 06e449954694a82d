from __future__ import annotations
from flask import Blueprint, request
from flask_jwt_extended import jwt_required
from erp import get_db
from erp.constants.permissions import MANAGE_SYSTEM_SETTINGS
from erp.decorators.auth import require_permission
from erp.services import duplicates
from erp.services.policy import current_actor
from erp.services.store import SqlEntityStore

dup_bp = Blueprint('duplicates', __name__)


def _store() -> SqlEntityStore:
    return SqlEntityStore(get_db())


@dup_bp.post('/scan')
@require_permission(MANAGE_SYSTEM_SETTINGS)
def scan():
    return duplicates.scan(current_actor(), _store())


@dup_bp.get('')
@require_permission(MANAGE_SYSTEM_SETTINGS)
def list_alerts():
    result = duplicates.list_alerts(
        current_actor(),
        _store(),
        status=request.args.get('status'),
        page=request.args.get('page'),
        limit=request.args.get('limit'),
    )
    return {
        'data': [duplicates.alert_json(a) for a in result['data']],
        'pagination': result['pagination'],
    }


@dup_bp.get('/count')
@jwt_required()
def open_count():
    # Badge endpoint: never fails the page for missing permission or store errors
    return {'open': duplicates.open_alert_count(current_actor(), _store())}


@dup_bp.get('/<int:alert_id>/entities')
@require_permission(MANAGE_SYSTEM_SETTINGS)
def compare(alert_id: int):
    result = duplicates.compare_entities(current_actor(), _store(), alert_id)
    return {
        'alert': duplicates.alert_json(result['alert']),
        'entity1': result['entity1'],
        'entity2': result['entity2'],
    }


@dup_bp.post('/<int:alert_id>/resolve')
@require_permission(MANAGE_SYSTEM_SETTINGS)
def resolve(alert_id: int):
    return duplicates.alert_json(duplicates.resolve(current_actor(), _store(), alert_id))


@dup_bp.post('/<int:alert_id>/ignore')
@require_permission(MANAGE_SYSTEM_SETTINGS)
def ignore(alert_id: int):
    return duplicates.alert_json(duplicates.ignore(current_actor(), _store(), alert_id))
