def register_models():
    """Import every model module so their tables are attached to Base.metadata."""
    from .authz import Base
    from . import audit, client, duplicate_alert, inventory_item, staff  # noqa: F401
    return Base
