"""SQLAlchemy implementations of the user and session repositories."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from bagtag.models import User, UserSession
from bagtag.repositories.interfaces import SessionRepository, UserRepository, UserRow


def _to_row(user: User) -> UserRow:
    return UserRow(
        id=str(user.id),
        email=user.email,
        display_name=user.display_name,
        password_hash=user.password_hash,
        email_verified=bool(user.email_verified),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_email(self, email: str) -> UserRow | None:
        stmt = select(User).where(User.email == email.lower())
        user = (await self._session.scalars(stmt)).first()
        return _to_row(user) if user else None

    async def get_by_id(self, user_id: str) -> UserRow | None:
        user = await self._session.get(User, user_id)
        return _to_row(user) if user else None

    async def add(
        self,
        *,
        email: str,
        display_name: str,
        password_hash: str,
        verification_token: str,
    ) -> UserRow:
        user = User(
            email=email.lower(),
            display_name=display_name,
            password_hash=password_hash,
            email_verified=False,
            verification_token=verification_token,
        )
        self._session.add(user)
        await self._session.flush()
        return _to_row(user)

    async def verify(self, verification_token: str) -> UserRow | None:
        stmt = select(User).where(User.verification_token == verification_token)
        user = (await self._session.scalars(stmt)).first()
        if user is None:
            return None
        user.email_verified = True
        user.verification_token = None
        await self._session.flush()
        return _to_row(user)


class SqlAlchemySessionRepository(SessionRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, *, token_hash: str, user_id: str, expires_at: datetime) -> None:
        self._session.add(UserSession(token_hash=token_hash, user_id=user_id, expires_at=expires_at))
        await self._session.flush()

    async def get_user(self, token_hash: str, *, now: datetime) -> UserRow | None:
        stmt = (
            select(User)
            .join(UserSession, UserSession.user_id == User.id)
            .where(UserSession.token_hash == token_hash, UserSession.expires_at > now)
        )
        user = (await self._session.scalars(stmt)).first()
        return _to_row(user) if user else None

    async def delete(self, token_hash: str) -> None:
        await self._session.execute(delete(UserSession).where(UserSession.token_hash == token_hash))
