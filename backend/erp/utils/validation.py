from __future__ import annotations
"""Reusable validation helpers for request and service input.

All helpers raise ValidationError (400) so callers reject input before any write.
"""
from typing import Iterable, Optional
from erp.errors import ValidationError


def validate_status(new_status: str, allowed: Iterable[str], field_name: str = 'status') -> str:
    """Validate that new_status is inside allowed.

    Returns the status (to enable inline usage) or raises ValidationError.
    """
    if new_status not in allowed:
        raise ValidationError(f"{field_name} invalid")
    return new_status


def optional_status_filter(raw: Optional[str], allowed: Iterable[str]) -> Optional[str]:
    """None / '' / 'all' mean no filter; anything else must be an allowed status."""
    if raw is None or raw == '' or raw.lower() == 'all':
        return None
    return validate_status(raw, allowed)


def require_fields(data: dict, *names: str) -> None:
    missing = [n for n in names if not data.get(n)]
    if missing:
        raise ValidationError(f"{', '.join(missing)} required")


__all__ = ['validate_status', 'optional_status_filter', 'require_fields']
