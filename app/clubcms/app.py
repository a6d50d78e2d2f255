"""
FastAPI application factory.
"""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from clubcms.config import Settings, get_settings
from clubcms.controller.admin_controller import provision_admin
from clubcms.controller.auth_controller import OtpService, utcnow
from clubcms.controller.otp_handler import Mailer, SmtpMailer
from clubcms.controller.otp_store import DatabaseOtpStore, InMemoryOtpStore, OtpStore, RedisOtpStore
from clubcms.cryptography import hash_secret
from clubcms.database import build_engine, build_session_factory, create_tables
from clubcms.exceptions import AppError
from clubcms.routes.auth_route import router as AuthRouter
from clubcms.routes.event_route import router as EventRouter
from clubcms.routes.team_route import router as TeamRouter

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "API Route not found"


def _admin_secret_hash(settings: Settings) -> str | None:
    if settings.admin_secret_hash:
        return settings.admin_secret_hash
    if settings.admin_secret:
        return hash_secret(settings.admin_secret)
    logger.warning("Neither ADMIN_SECRET_HASH nor ADMIN_SECRET is set; admin login is disabled.")
    return None


def _build_otp_store(settings: Settings, session_factory, clock) -> OtpStore:
    if settings.otp_store == "database":
        return DatabaseOtpStore(session_factory)
    if settings.otp_store == "redis":
        if not settings.redis_url:
            raise ValueError("OTP_STORE=redis requires REDIS_URL")
        return RedisOtpStore(settings.redis_url, clock=clock)
    return InMemoryOtpStore()


def _bootstrap_admin(settings: Settings, session_factory, secret_hash: str | None) -> None:
    if not settings.admin_email or not secret_hash:
        return
    db = session_factory()
    try:
        provision_admin(db, settings.admin_email, secret_hash)
    finally:
        db.close()


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        messages = []
        for err in exc.errors():
            loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
            messages.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": ", ".join(messages)})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # A path that exists but not for this method answers like an unknown route.
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return JSONResponse(status_code=404, content={"message": NOT_FOUND_MESSAGE})
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "An unexpected server error occurred."},
        )


def create_app(
    settings: Settings | None = None,
    *,
    mailer: Mailer | None = None,
    otp_store: OtpStore | None = None,
    clock=utcnow,
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Club Admin Backend", version="0.1.0")

    engine = build_engine(settings.database_url)
    session_factory = build_session_factory(engine)
    secret_hash = _admin_secret_hash(settings)

    # Wrapped so the server still starts when the database is not reachable yet.
    try:
        create_tables(engine)
        _bootstrap_admin(settings, session_factory, secret_hash)
    except SQLAlchemyError as e:
        logger.warning("Could not prepare database tables: %s", e)

    app.state.settings = settings
    app.state.engine = engine
    app.state.SessionLocal = session_factory
    app.state.otp_service = OtpService(
        store=otp_store if otp_store is not None else _build_otp_store(settings, session_factory, clock),
        mailer=mailer
        or SmtpMailer(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.mail_sender,
            password=settings.smtp_password,
        ),
        session_factory=session_factory,
        admin_email=settings.admin_email,
        admin_secret_hash=secret_hash,
        club_name=settings.club_name,
        expire_minutes=settings.otp_expire_minutes,
        clock=clock,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["POST", "GET", "OPTIONS", "DELETE", "PUT"],
        allow_headers=["*"],
    )

    prefix = settings.api_prefix.rstrip("/")
    app.include_router(AuthRouter, tags=["Auth"], prefix=f"{prefix}/auth")
    app.include_router(EventRouter, tags=["Event"], prefix=f"{prefix}/events")
    app.include_router(TeamRouter, tags=["Team"], prefix=f"{prefix}/team-members")

    @app.get("/test", include_in_schema=False)
    async def test_route():
        return {"message": "Test route is working!"}

    # Serve uploaded images
    os.makedirs(settings.upload_dir, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")

    _register_exception_handlers(app)
    return app
