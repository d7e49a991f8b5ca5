"""Repository abstractions for the service layer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from bagtag.domain.equipment import EquipmentRecord, LaunchData, Location


@dataclass
class UserRow:
    id: str
    email: str
    display_name: str
    password_hash: str
    email_verified: bool


class EquipmentRepository(Protocol):
    """Per-user equipment document store."""

    async def list_for_user(self, user_id: str) -> list[EquipmentRecord]: ...

    async def get(self, user_id: str, record_id: str) -> EquipmentRecord | None: ...

    async def add(self, user_id: str, record: EquipmentRecord) -> EquipmentRecord: ...

    async def replace(self, user_id: str, record: EquipmentRecord) -> EquipmentRecord | None: ...

    async def set_location(
        self, user_id: str, record_id: str, location: Location
    ) -> EquipmentRecord | None: ...

    async def set_launch_data(
        self, user_id: str, record_id: str, launch_data: LaunchData | None
    ) -> EquipmentRecord | None: ...

    async def set_trade_in(
        self,
        user_id: str,
        record_id: str,
        *,
        low: float,
        high: float,
        checked_at: datetime,
    ) -> EquipmentRecord | None: ...

    async def delete(self, user_id: str, record_id: str) -> bool: ...


class UserRepository(Protocol):
    async def get_by_email(self, email: str) -> UserRow | None: ...

    async def get_by_id(self, user_id: str) -> UserRow | None: ...

    async def add(
        self,
        *,
        email: str,
        display_name: str,
        password_hash: str,
        verification_token: str,
    ) -> UserRow: ...

    async def verify(self, verification_token: str) -> UserRow | None: ...


class SessionRepository(Protocol):
    async def add(self, *, token_hash: str, user_id: str, expires_at: datetime) -> None: ...

    async def get_user(self, token_hash: str, *, now: datetime) -> UserRow | None: ...

    async def delete(self, token_hash: str) -> None: ...
