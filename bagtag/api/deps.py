"""API dependency helpers and service providers."""

from functools import lru_cache

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from bagtag import db
from bagtag.core.exceptions import AuthError
from bagtag.infra.unit_of_work import SqlAlchemyUnitOfWork
from bagtag.services.accounts import AccountService, SessionContext
from bagtag.services.delete_confirmation import DeleteConfirmationRegistry
from bagtag.services.equipment import EquipmentService
from bagtag.services.extraction import AIExtractionService
from bagtag.services.intake import IntakeService
from bagtag.services.storage import BlobStore, LocalBlobStore

__all__ = [
    "get_account_service",
    "get_blob_store",
    "get_delete_confirmations",
    "get_equipment_service",
    "get_extraction_service",
    "get_intake_service",
    "get_session_context",
]

_bearer = HTTPBearer(auto_error=False)


# --- Service providers for DI ---


def _uow_factory() -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork(db.SessionLocal)


def get_equipment_service() -> EquipmentService:
    return EquipmentService(_uow_factory)


def get_account_service() -> AccountService:
    return AccountService(_uow_factory)


@lru_cache
def get_blob_store() -> BlobStore:
    return LocalBlobStore()


@lru_cache
def get_extraction_service() -> AIExtractionService:
    return AIExtractionService()


def get_intake_service(
    store: BlobStore = Depends(get_blob_store),
    extractor: AIExtractionService = Depends(get_extraction_service),
) -> IntakeService:
    return IntakeService(store, extractor)


def get_delete_confirmations(request: Request) -> DeleteConfirmationRegistry:
    return request.app.state.delete_confirmations


async def get_session_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    accounts: AccountService = Depends(get_account_service),
) -> SessionContext:
    """Resolve the bearer token into the signed-in user's session."""
    if credentials is None or not credentials.credentials:
        raise AuthError("Not authenticated")
    session = await accounts.resolve(credentials.credentials)
    structlog.contextvars.bind_contextvars(user_id=session.user_id)
    return session
