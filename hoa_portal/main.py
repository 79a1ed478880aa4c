# hoa_portal/main.py
"""
FastAPI application entry point.
Includes CORS, request timing, error handlers, and all routers.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from hoa_portal.routers import admin_users, audit_logs, health, permits, stickers
from hoa_portal.config import Settings, settings as default_settings
from hoa_portal.database import Database
from hoa_portal.exceptions import HOAPortalError
from hoa_portal.services.auth_guard import AuthorizationGuard
from hoa_portal.utils.logger import get_logger
import time

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the app. A Database passed in is owned (and disposed) by the caller."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 HOA Portal functions starting up...")
        db = database or Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
        db.create_tables()
        app.state.db = db
        logger.info("✅ Database tables ready")
        logger.info(f"🌐 Listening on http://{settings.BACKEND_HOST}:{settings.BACKEND_PORT}")
        yield
        logger.info("🛑 HOA Portal functions shutting down...")
        if database is None:
            db.dispose()

    app = FastAPI(
        title="HOA Portal Functions API",
        description="Privileged workflows: sticker approval, permit processing, admin provisioning.",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.guard = AuthorizationGuard(settings)

    # ── CORS (admin dashboard, platform dashboard, resident app) ────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["POST", "GET", "OPTIONS"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )

    # ── Request Timing Middleware ────────────────────────────────────────────
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration = round((time.time() - start) * 1000, 2)
        logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
        return response

    # ── Error Handlers ───────────────────────────────────────────────────────
    @app.exception_handler(HOAPortalError)
    async def portal_error_handler(request: Request, exc: HOAPortalError):
        logger.warning(f"{request.method} {request.url.path} rejected [{exc.code}]: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'] if p != 'body')}: {err['msg']}" for err in exc.errors()
        )
        logger.warning(f"{request.method} {request.url.path} invalid body: {problems}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": f"Invalid request: {problems}"},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Internal server error"},
        )

    # ── Routers ──────────────────────────────────────────────────────────────
    app.include_router(stickers.router,    prefix="/functions/v1", tags=["Stickers"])
    app.include_router(permits.router,     prefix="/functions/v1", tags=["Construction Permits"])
    app.include_router(admin_users.router, prefix="/functions/v1", tags=["Admin Accounts"])
    app.include_router(audit_logs.router,  prefix="/functions/v1", tags=["Audit"])
    app.include_router(health.router,      prefix="/api/v1",       tags=["Health"])

    return app


app = create_app()
