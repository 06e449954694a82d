from functools import wraps
from flask_jwt_extended import get_jwt, verify_jwt_in_request
from erp.services.policy import check_permission


def require_permission(permission: str):
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            check_permission(get_jwt().get('role'), permission)
            return fn(*args, **kwargs)
        return wrapper
    return outer
