"""Account Service: sign-up, email verification and bearer sessions."""

from __future__ import annotations

import hashlib
import secrets
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.security import check_password_hash, generate_password_hash

from bagtag.core.config import settings
from bagtag.core.exceptions import (
    AuthError,
    ConflictError,
    InfrastructureError,
    ValidationError,
)
from bagtag.infra.unit_of_work import UnitOfWork
from bagtag.repositories.interfaces import UserRow
from bagtag.services.notification import send_verification

UnitOfWorkFactory = Callable[[], UnitOfWork]
VerificationSender = Callable[[str, str, str | None], Awaitable[None]]

MIN_PASSWORD_LENGTH = 6
VERIFICATION_SENT = "Verification email sent!"

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SessionContext:
    """The signed-in user for one request.

    Created at login, looked up from the bearer token on each request and
    dropped at logout. ``user_id`` is the partition key for every store call.
    """

    user_id: str
    email: str
    display_name: str
    token: str
    expires_at: datetime | None = None


@dataclass(frozen=True)
class PendingVerification:
    user_id: str
    email: str
    message: str = VERIFICATION_SENT


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _normalize_email(email: str) -> str:
    value = (email or "").strip().lower()
    local, _, domain = value.partition("@")
    if not local or "." not in domain:
        raise ValidationError("a valid email address is required")
    return value


def _context(user: UserRow, token: str, expires_at: datetime | None) -> SessionContext:
    return SessionContext(
        user_id=user.id,
        email=user.email,
        display_name=user.display_name,
        token=token,
        expires_at=expires_at,
    )


class AccountService:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        *,
        send_verification: VerificationSender = send_verification,
        session_ttl: timedelta | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._send_verification = send_verification
        self._session_ttl = session_ttl or timedelta(hours=settings.session_ttl_hours)

    async def sign_up(self, email: str, password: str, display_name: str) -> PendingVerification:
        address = _normalize_email(email)
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        name = (display_name or "").strip() or address.split("@", 1)[0]
        token = secrets.token_urlsafe(32)

        try:
            async with self._uow_factory() as uow:
                if await uow.users.get_by_email(address) is not None:
                    raise ConflictError("an account with this email already exists")
                user = await uow.users.add(
                    email=address,
                    display_name=name,
                    password_hash=generate_password_hash(password),
                    verification_token=token,
                )
        except IntegrityError as exc:
            raise ConflictError("an account with this email already exists") from exc
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc

        logger.info("account_created", user_id=user.id)
        await self._send_verification(address, token, name)
        return PendingVerification(user_id=user.id, email=address)

    async def verify_email(self, token: str) -> None:
        try:
            async with self._uow_factory() as uow:
                user = await uow.users.verify(token)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc
        if user is None:
            raise AuthError("Invalid or expired verification token")
        logger.info("email_verified", user_id=user.id)

    async def login(
        self, email: str, password: str, *, now: datetime | None = None
    ) -> SessionContext:
        address = (email or "").strip().lower()
        current = now or datetime.now(timezone.utc)
        token = secrets.token_urlsafe(32)
        expires_at = current + self._session_ttl

        try:
            async with self._uow_factory() as uow:
                user = await uow.users.get_by_email(address)
                if user is None or not check_password_hash(user.password_hash, password or ""):
                    raise AuthError("Invalid email or password")
                if not user.email_verified:
                    raise AuthError("Email not verified")
                await uow.sessions.add(
                    token_hash=hash_token(token), user_id=user.id, expires_at=expires_at
                )
        except AuthError:
            logger.info("login_rejected")
            raise
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc

        logger.info("login_succeeded", user_id=user.id)
        return _context(user, token, expires_at)

    async def resolve(self, token: str, *, now: datetime | None = None) -> SessionContext:
        """Look up the session for a bearer token; expired tokens are rejected."""
        if not token:
            raise AuthError("Not authenticated")
        current = now or datetime.now(timezone.utc)
        try:
            async with self._uow_factory() as uow:
                user = await uow.sessions.get_user(hash_token(token), now=current)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc
        if user is None:
            raise AuthError("Not authenticated")
        return _context(user, token, None)

    async def logout(self, session: SessionContext) -> None:
        try:
            async with self._uow_factory() as uow:
                await uow.sessions.delete(hash_token(session.token))
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc
        logger.info("logout", user_id=session.user_id)
