from flask import Blueprint, request, abort
from flask_jwt_extended import create_access_token, jwt_required, get_jwt_identity
from sqlalchemy import select
from erp.models.authz import User
from erp import get_db
from erp.constants.permissions import Role, ROLE_PERMISSIONS
from erp.decorators.auth import require_permission
from erp.services.policy import permissions_for_role, resolve_role
from erp.utils.validation import require_fields

iam_bp = Blueprint('iam', __name__)


@iam_bp.post('/auth/login')
def login():
    data = request.json or {}
    require_fields(data, 'email', 'password')
    email = data['email']; password = data['password']
    session = get_db()
    user = session.execute(select(User).where(User.email==email)).scalar_one_or_none()
    if not user or not user.is_active or not user.verify_password(password):
        abort(401, description='invalid credentials')
    # Role is copied as stored; the policy layer denies anything outside the closed set
    claims = {'role': user.role, 'name': user.name}
    token = create_access_token(identity=str(user.id), additional_claims=claims)
    return {'access_token': token}


@iam_bp.get('/auth/me')
@jwt_required()
def me():
    session = get_db()
    user = session.execute(select(User).where(User.id==get_jwt_identity())).scalar_one_or_none()
    if not user:
        abort(404)
    return {
        'id': user.id,
        'name': user.name,
        'email': user.email,
        'role': user.role,
        'role_valid': resolve_role(user.role) is not None,
        'permissions': sorted(permissions_for_role(user.role)),
    }


@iam_bp.get('/roles')
@require_permission('manage_users')
def list_roles():
    return {
        'data': [
            {'name': role.value, 'permissions': sorted(ROLE_PERMISSIONS[role])}
            for role in Role
        ]
    }
