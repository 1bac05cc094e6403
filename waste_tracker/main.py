import os
from contextlib import asynccontextmanager
from pathlib import Path

import sentry_sdk
import structlog
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from sentry_sdk.integrations.starlette import StarletteIntegration
from starlette.middleware.cors import CORSMiddleware

from waste_tracker.api import errors
from waste_tracker.api.routers.healthz import router as healthz_router
from waste_tracker.api.routers.readyz import router as readyz_router
from waste_tracker.api.routers.reports import router as reports_router
from waste_tracker.api.routers.upload import router as upload_router
from waste_tracker.core.config import settings
from waste_tracker.core.startup import run_database_migrations
from waste_tracker.logging import setup_logging
from waste_tracker.middleware.rate_limit import rate_limit_middleware
from waste_tracker.middleware.request_id import request_id_middleware
from waste_tracker.middleware.security_headers import security_headers_middleware

_LOCAL_ORIGINS_DEV = r"https?://(localhost|127\.0\.0\.1)(:\d+)?"
_LOCAL_ORIGINS_PROD = r"https?://localhost(:\d+)?"


def _init_sentry(env: str) -> None:
    dsn = os.getenv("SENTRY_DSN")
    if not dsn:
        return
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


def _add_cors(app: FastAPI, env: str) -> None:
    methods = ["GET", "POST", "PATCH", "DELETE", "OPTIONS", "HEAD"]
    allow_origins = [o.strip() for o in os.getenv("ALLOW_ORIGINS", "").split(",") if o.strip()]
    if allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allow_origins,
            allow_credentials=True,
            allow_methods=methods,
            allow_headers=["*"],
        )
        return
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=_LOCAL_ORIGINS_PROD if env == "prod" else _LOCAL_ORIGINS_DEV,
        allow_credentials=True,
        allow_methods=methods,
        allow_headers=["*"],
    )


@asynccontextmanager
async def _lifespan(_: FastAPI):
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    run_database_migrations()
    yield


def create_app() -> FastAPI:
    setup_logging()
    env = os.getenv("APP_ENV", "dev")
    _init_sentry(env)

    app = FastAPI(title="Waste Tracker API", version="0.1.0", lifespan=_lifespan)
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(rate_limit_middleware)
    _add_cors(app, env)
    errors.install(app)

    app.include_router(reports_router)
    app.include_router(upload_router)
    app.include_router(healthz_router)
    app.include_router(readyz_router)
    app.mount(
        settings.upload_url_prefix,
        StaticFiles(directory=Path(settings.upload_dir), check_dir=False),
        name="uploads",
    )

    @app.get("/health")
    def health():
        return {"status": "ok", "env": os.getenv("APP_ENV", "dev")}

    if env != "prod":

        @app.get("/debug/error")
        def debug_error():  # pragma: no cover - behavior verified by 404 in prod test
            raise RuntimeError("intentional error for Sentry debug")

    structlog.get_logger(__name__).info("app_startup", env=env)
    return app


app = create_app()
