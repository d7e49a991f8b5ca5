"""In-memory stand-ins for the Unit of Work and its repositories."""

from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import datetime

from bagtag.domain.equipment import EquipmentRecord, LaunchData, Location
from bagtag.repositories.interfaces import UserRow


class InMemoryItemRepository:
    def __init__(self):
        self.rows: dict[str, tuple[str, EquipmentRecord]] = {}
        self.writes = 0
        self._ids = itertools.count(1)

    def _owned(self, user_id, record_id):
        row = self.rows.get(record_id)
        if row is None or row[0] != user_id:
            return None
        return row[1]

    def _store(self, user_id, record):
        self.rows[record.id] = (user_id, record)
        self.writes += 1
        return record

    async def list_for_user(self, user_id):
        records = [rec for owner, rec in self.rows.values() if owner == user_id]
        return sorted(records, key=lambda r: (r.created_at, r.id), reverse=True)

    async def get(self, user_id, record_id):
        return self._owned(user_id, record_id)

    async def add(self, user_id, record):
        return self._store(user_id, replace(record, id=f"item-{next(self._ids)}", version=1))

    async def replace(self, user_id, record):
        current = self._owned(user_id, record.id)
        if current is None:
            return None
        return self._store(user_id, replace(record, version=current.version + 1))

    async def _patch(self, user_id, record_id, **changes):
        current = self._owned(user_id, record_id)
        if current is None:
            return None
        return self._store(user_id, replace(current, version=current.version + 1, **changes))

    async def set_location(self, user_id, record_id, location: Location):
        return await self._patch(user_id, record_id, location=location)

    async def set_launch_data(self, user_id, record_id, launch_data: LaunchData | None):
        return await self._patch(user_id, record_id, launch_data=launch_data)

    async def set_trade_in(self, user_id, record_id, *, low, high, checked_at):
        return await self._patch(
            user_id,
            record_id,
            trade_in_low=low,
            trade_in_high=high,
            last_trade_in_checked_at=checked_at,
        )

    async def delete(self, user_id, record_id):
        if self._owned(user_id, record_id) is None:
            return False
        del self.rows[record_id]
        return True


class InMemoryUserRepository:
    def __init__(self):
        self.users: dict[str, UserRow] = {}
        self.tokens: dict[str, str] = {}
        self._ids = itertools.count(1)

    async def get_by_email(self, email):
        return next((u for u in self.users.values() if u.email == email.lower()), None)

    async def get_by_id(self, user_id):
        return self.users.get(user_id)

    async def add(self, *, email, display_name, password_hash, verification_token):
        user = UserRow(
            id=f"user-{next(self._ids)}",
            email=email.lower(),
            display_name=display_name,
            password_hash=password_hash,
            email_verified=False,
        )
        self.users[user.id] = user
        self.tokens[verification_token] = user.id
        return user

    async def verify(self, verification_token):
        user_id = self.tokens.pop(verification_token, None)
        if user_id is None:
            return None
        self.users[user_id].email_verified = True
        return self.users[user_id]


class InMemorySessionRepository:
    def __init__(self, users: InMemoryUserRepository):
        self._users = users
        self.sessions: dict[str, tuple[str, datetime]] = {}

    async def add(self, *, token_hash, user_id, expires_at):
        self.sessions[token_hash] = (user_id, expires_at)

    async def get_user(self, token_hash, *, now):
        entry = self.sessions.get(token_hash)
        if entry is None or entry[1] <= now:
            return None
        return self._users.users.get(entry[0])

    async def delete(self, token_hash):
        self.sessions.pop(token_hash, None)


class FakeUnitOfWork:
    def __init__(self, store: InMemoryStore):
        self.items = store.items
        self.users = store.users
        self.sessions = store.sessions
        self._store = store

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if exc_type is None:
            self._store.commits += 1
        return False

    async def commit(self) -> None:  # pragma: no cover - not used
        return None

    async def rollback(self) -> None:  # pragma: no cover - not used
        return None


class InMemoryStore:
    def __init__(self):
        self.items = InMemoryItemRepository()
        self.users = InMemoryUserRepository()
        self.sessions = InMemorySessionRepository(self.users)
        self.commits = 0

    def uow_factory(self) -> FakeUnitOfWork:
        return FakeUnitOfWork(self)


class FakeClock:
    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeExtractor:
    """Scripted AI answers; set ``fail`` to make every call raise ExtractionError."""

    def __init__(self):
        from bagtag.domain.equipment import Category
        from bagtag.schemas.suggestion import (
            IdentifiedEquipment,
            ReceiptSuggestion,
            TradeInQuote,
        )

        self.fail = False
        self.calls: list[str] = []
        self.identified = IdentifiedEquipment(
            brand="Ping", model="G425 Max", category=Category.DRIVER, loft="10.5"
        )
        self.receipt = ReceiptSuggestion(price=449.99, purchase_date="2021-04-02")
        self.quote = TradeInQuote(low=120.0, high=180.0)
        self.models = ["G425 Max", "G430 LST"]

    def _call(self, name):
        from bagtag.core.exceptions import ExtractionError

        self.calls.append(name)
        if self.fail:
            raise ExtractionError(f"{name} failed")

    async def identify_equipment(self, image, mime_type):
        self._call("identify_equipment")
        return self.identified

    async def extract_receipt(self, image, mime_type):
        self._call("extract_receipt")
        return self.receipt

    async def search_catalog(self, query):
        self._call("search_catalog")
        return self.identified

    async def estimate_trade_in(self, brand, model, category, set_composition=None):
        self._call("estimate_trade_in")
        return self.quote

    async def list_models(self, brand, category):
        self._call("list_models")
        return list(self.models)
