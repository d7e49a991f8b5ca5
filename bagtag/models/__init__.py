# Imported so Alembic sees every table on Base.metadata
# bagtag/models/__init__.py
from .base import Base
from .equipment_item import EquipmentItem
from .user import User
from .user_session import UserSession

__all__ = [
    "Base",
    "EquipmentItem",
    "User",
    "UserSession",
]
