import os
from contextlib import asynccontextmanager
from pathlib import Path

import sentry_sdk
import structlog
from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from sentry_sdk.integrations.starlette import StarletteIntegration
from slowapi.errors import RateLimitExceeded
from starlette.middleware.cors import CORSMiddleware

from bagtag import db
from bagtag.api import errors
from bagtag.api.routers import auth, healthz, items, meta, readyz, reports, scans
from bagtag.core.config import settings
from bagtag.core.startup import run_database_migrations
from bagtag.logging import setup_logging
from bagtag.middleware.rate_limit import rate_limit_middleware, rate_limited_response
from bagtag.middleware.request_id import request_id_middleware
from bagtag.middleware.security_headers import security_headers_middleware
from bagtag.services.delete_confirmation import DeleteConfirmationRegistry


def _init_sentry(env: str) -> None:
    dsn = os.getenv("SENTRY_DSN")
    if not dsn:
        return
    # traces_sample_rate: clamp to [0.0, 0.2]
    try:
        rate_raw = float(os.getenv("SENTRY_TRACES_RATE", "0"))
    except ValueError:
        rate_raw = 0.0
    sentry_sdk.init(
        dsn=dsn,
        environment=env,
        release=os.getenv("RELEASE"),
        integrations=[StarletteIntegration()],
        traces_sample_rate=max(0.0, min(0.2, rate_raw)),
        send_default_pii=False,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    run_database_migrations()
    yield
    await db.engine.dispose()


def create_app() -> FastAPI:
    # Initialize structured logging first
    setup_logging(os.getenv("LOG_FILE"))
    env = os.getenv("APP_ENV", "dev")
    _init_sentry(env)

    app = FastAPI(title="BagTag", version="0.1.0", lifespan=lifespan)
    app.state.delete_confirmations = DeleteConfirmationRegistry(
        settings.delete_confirm_window_seconds
    )

    app.middleware("http")(request_id_middleware)
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(rate_limit_middleware)

    # CORS from ALLOW_ORIGINS env (comma-separated)
    allow_origins = [o.strip() for o in os.getenv("ALLOW_ORIGINS", "").split(",") if o.strip()]
    if allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allow_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "HEAD"],
            allow_headers=["*"],
        )

    errors.install(app)
    for module in (auth, items, scans, reports, meta, healthz, readyz):
        app.include_router(module.router)

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount(
        settings.upload_base_url.rstrip("/") or "/uploads",
        StaticFiles(directory=upload_dir),
        name="uploads",
    )

    @app.exception_handler(RateLimitExceeded)
    async def _rate_limit_handler(request: Request, exc: RateLimitExceeded):
        info = getattr(request.state, "rate_limit_info", None)
        if not isinstance(info, dict):
            info = {
                "method": request.method,
                "ip": (request.client.host if request.client else None) or "-",
                "limit": "-",
            }
        return rate_limited_response(info)

    structlog.get_logger(__name__).info("app_startup", env=env)
    return app


app = create_app()
