"""SQLAlchemy implementations of repository interfaces."""

from .account import SqlAlchemySessionRepository, SqlAlchemyUserRepository
from .equipment import SqlAlchemyEquipmentRepository

__all__ = [
    "SqlAlchemyEquipmentRepository",
    "SqlAlchemySessionRepository",
    "SqlAlchemyUserRepository",
]
