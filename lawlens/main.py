"""
FastAPI Application Entry Point
"""

import asyncio
from contextlib import asynccontextmanager, suppress
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware

from lawlens.api.v1.router import api_router
from lawlens.core.exceptions import setup_exception_handlers
from lawlens.core.logging import logger
from lawlens.config.settings import settings
from lawlens.middleware.logging import logging_middleware
from lawlens.middleware.request_id import request_id_middleware
from lawlens.middleware.security_headers import security_headers_middleware
from lawlens.services.auth_service import AdminAuth, run_session_sweeper
from lawlens.services.auth_state import build_auth_state_store
from lawlens.services.demo_data import is_demo_mode


def _masked_database_url(url: str) -> str:
    if "@" not in url or "://" not in url:
        return url
    scheme, rest = url.split("://", 1)
    return f"{scheme}://***@{rest.split('@', 1)[1]}"


def build_admin_auth() -> AdminAuth:
    return AdminAuth(build_auth_state_store(settings.AUTH_STATE_BACKEND), settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup checks, table creation and the session sweeper"""
    logger.info("Checking backing services...")

    try:
        logger.info(f"Connecting to database: {_masked_database_url(settings.DATABASE_URL)}")
        from lawlens.config.database import engine, Base
        import lawlens.models  # noqa: F401
        with engine.connect() as conn:
            conn.exec_driver_sql("SELECT 1")
        logger.info("Database connection OK")
        if settings.AUTO_CREATE_TABLES:
            Base.metadata.create_all(bind=engine)
            logger.info("Database tables ready")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")

    if settings.AUTH_STATE_BACKEND == "redis":
        try:
            from lawlens.config.redis import redis_client
            redis_client.ping()
            logger.info("Redis connection OK")
        except Exception as e:
            logger.error(f"Redis connection failed: {e}")

    if not getattr(app.state, "admin_auth", None):
        app.state.admin_auth = build_admin_auth()

    if is_demo_mode():
        logger.warning("Demo mode: search and the Bad Decision Calculator serve sample data")
    if not settings.ADMIN_EMAIL:
        logger.warning("ADMIN_EMAIL is not set; admin login is disabled")

    sweeper = asyncio.create_task(
        run_session_sweeper(app.state.admin_auth, settings.SESSION_CLEANUP_INTERVAL_SECONDS)
    )
    logger.info("Server started")
    yield
    sweeper.cancel()
    with suppress(asyncio.CancelledError):
        await sweeper
    logger.info("Server stopped")


app = FastAPI(
    title="LawLens API",
    description="Local law answers, paid research requests and the Bad Decision Calculator",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(
    TrustedHostMiddleware,
    allowed_hosts=settings.ALLOWED_HOSTS,
)

app.middleware("http")(security_headers_middleware)
app.middleware("http")(logging_middleware)
app.middleware("http")(request_id_middleware)

app.include_router(api_router, prefix="/api")

setup_exception_handlers(app)


@app.get("/")
async def root():
    return {"message": "LawLens API", "version": settings.APP_VERSION}


@app.get("/health")
async def health_check():
    """Database connectivity and mode"""
    health_status = {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "demo": is_demo_mode(),
        "services": {}
    }

    try:
        from lawlens.config.database import engine
        with engine.connect() as conn:
            conn.exec_driver_sql("SELECT 1")
        health_status["services"]["database"] = {"status": "healthy"}
    except Exception as e:
        health_status["status"] = "unhealthy"
        health_status["services"]["database"] = {"status": "error", "message": str(e)}

    return health_status
