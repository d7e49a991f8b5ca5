from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from bagtag import db
from bagtag.core.startup import is_migration_completed, last_migration_error
from bagtag.schemas.common import OkResponse

router = APIRouter(prefix="/readyz", tags=["health"])


def _unavailable(code: str, message: str, detail: str | None = None) -> JSONResponse:
    payload = {"error": {"code": code, "message": message}}
    if detail:
        payload["error"]["detail"] = detail
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=payload)


@router.get(
    "",
    response_model=OkResponse,
    summary="Readiness probe",
    description="Runs SELECT 1 against the database; 503 until startup migrations finish.",
)
async def readyz():
    if not is_migration_completed():
        return _unavailable(
            "migrations_pending", "Database migrations are still running", last_migration_error()
        )
    try:
        async with db.SessionLocal() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        return _unavailable("database_unavailable", "Database is not reachable")
    return {"ok": True}
