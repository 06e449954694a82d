from __future__ import annotations
"""Domain error taxonomy.

Each error is a werkzeug HTTPException so the app-wide error handler renders it
with the standard JSON shape; services raise them directly instead of abort().
"""
from typing import Optional
from werkzeug.exceptions import BadRequest, Conflict, Forbidden, NotFound


class AuthorizationError(Forbidden):
    """Actor lacks the permission required for the operation."""

    def __init__(self, permission: str, description: Optional[str] = None):
        self.permission = permission
        super().__init__(description or f'Unauthorized: Missing permission {permission}')


class ValidationError(BadRequest):
    pass


class NotFoundError(NotFound):
    pass


class InvalidStateError(Conflict):
    pass

__all__ = ['AuthorizationError', 'ValidationError', 'NotFoundError', 'InvalidStateError']
