"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize the FastAPI application with metadata (title, version)
  - Configure middleware (body limit, request context, CORS)
  - Mount the JSON API under /api and the form actions under /app
  - Expose health check and metrics endpoints

Collaborators:
  - interfaces.api.http.router: estate JSON routes
  - interfaces.web.actions: server-side form actions
  - api.auth_routes: register/login/logout/me
  - infrastructure.db.pool: opened in the lifespan when Postgres is configured

Notes:
  - Middleware order (last added runs first): RequestContext -> CORS -> BodyLimit
  - /healthz follows the Kubernetes health check convention
  - Env validation happens at startup (lifespan), not at import time
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..container import get_record_store
from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.metrics import get_metrics_response
from ..crosscutting.middleware import BodyLimitMiddleware, RequestContextMiddleware
from ..infrastructure.db.pool import close_pool, init_pool
from ..interfaces.api.http.router import router as api_router
from ..interfaces.web.actions import router as form_router
from .auth_routes import router as auth_router
from .exception_handlers import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the DB pool (Postgres mode only) and close it on shutdown."""
    settings = get_settings()
    uses_postgres = settings.uses_postgres()

    if uses_postgres:
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    try:
        logger.info(
            "LegatePro API starting up",
            extra={
                "app_env": settings.app_env,
                "store": "postgres" if uses_postgres else "memory",
                "page_cache": "redis" if settings.redis_url.strip() else "memory",
                "sensitive_documents_policy": settings.sensitive_documents_policy,
            },
        )
        yield
    finally:
        if uses_postgres:
            close_pool()
        logger.info("LegatePro API shutting down")


def _get_allowed_origins() -> list[str]:
    try:
        return get_settings().get_allowed_origins_list()
    except Exception:
        return ["http://localhost:3000"]


def create_app() -> FastAPI:
    app = FastAPI(
        title="LegatePro API",
        version=__version__,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "estates", "description": "Estates, collaborators, activity"},
            {"name": "rent", "description": "Rent payments"},
            {"name": "utilities", "description": "Utility accounts"},
            {"name": "invoices", "description": "Invoices (minor units)"},
            {"name": "auth", "description": "User authentication (JWT)"},
        ],
    )

    app.add_middleware(BodyLimitMiddleware)
    try:
        allow_credentials = get_settings().cors_allow_credentials
    except Exception:
        allow_credentials = False
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_get_allowed_origins(),
        allow_credentials=allow_credentials,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-Id"],
    )
    app.add_middleware(RequestContextMiddleware)

    app.include_router(api_router, prefix="/api")
    app.include_router(auth_router, prefix="/api")
    app.include_router(form_router)

    register_exception_handlers(app)

    @app.get("/healthz", tags=["health"])
    def healthz(request: Request):
        """Store connectivity plus the request id for correlation."""
        store_status = "disconnected"
        try:
            if get_record_store().ping():
                store_status = "connected"
        except Exception as exc:
            logger.warning("Health check: store unavailable", extra={"error": str(exc)})

        return {
            "ok": store_status == "connected",
            "db": store_status,
            "request_id": getattr(request.state, "request_id", None),
        }

    @app.get("/metrics", tags=["health"])
    def metrics():
        payload, content_type = get_metrics_response()
        return Response(content=payload, media_type=content_type)

    return app


app = create_app()
