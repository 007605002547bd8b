"""Main application entry point."""

import logging
import traceback
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.routes import api_router
from app.core.config import Settings, get_settings
from app.core.exceptions import EnigmaError, InfrastructureError
from app.db.persistence import create_persistence
from app.services import build_services
from app.services.bootstrap_service import bootstrap

# ─────────────────────────────────────────────────────────────
# Logging Setup
# ─────────────────────────────────────────────────────────────
settings = get_settings()

log_level = logging.DEBUG if settings.debug else logging.INFO

logging.basicConfig(
    level=log_level,
    format="%(asctime)s | %(levelname)-8s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("enigma")

if not settings.debug:
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ─────────────────────────────────────────────────────────────
# Global exception handler - logs full traceback
# ─────────────────────────────────────────────────────────────
async def catch_exceptions_middleware(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as exc:
        logger.error("=" * 60)
        logger.error(f"500 ERROR on {request.method} {request.url.path}")
        logger.error(f"Exception: {type(exc).__name__}: {exc}")
        logger.error("Full traceback:")
        logger.error(traceback.format_exc())
        logger.error("=" * 60)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error"},
        )


# ─────────────────────────────────────────────────────────────
# Domain errors -> {success: false, error} envelope
# ─────────────────────────────────────────────────────────────
async def enigma_error_handler(request: Request, exc: EnigmaError):
    if isinstance(exc, InfrastructureError):
        logger.error(f"{exc.status_code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(
        status_code=422,
        content={"success": False, "error": message},
    )


# ─────────────────────────────────────────────────────────────
# App factory
# ─────────────────────────────────────────────────────────────
def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # ─── Startup ───
        logger.info(f"Starting up {app_settings.app_name} v{app.version}...")

        persistence = create_persistence(app_settings)
        services = build_services(persistence, app_settings)
        await bootstrap(services.store, app_settings)
        app.state.services = services
        logger.info(f"Storage ready: {services.store.describe()}")

        yield

        # ─── Shutdown ───
        logger.info("Shutting down application...")
        await services.store.close()

    app = FastAPI(
        title=app_settings.app_name,
        description="Sequential riddle hunt with per-player rate limiting",
        version="1.0.0",
        docs_url="/docs" if app_settings.debug else None,
        redoc_url="/redoc" if app_settings.debug else None,
        openapi_url="/openapi.json" if app_settings.debug else None,
        lifespan=lifespan,
        default_response_class=JSONResponse,
    )

    app.add_exception_handler(EnigmaError, enigma_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # ─── Security Middleware ───
    app.add_middleware(BaseHTTPMiddleware, dispatch=catch_exceptions_middleware)

    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=app_settings.allowed_hosts_list,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        max_age=600,
    )

    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "app": app_settings.app_name, "version": "1.0.0"}

    return app


app = create_app()


# ─────────────────────────────────────────────────────────────
# Run with Uvicorn (only when running directly)
# ─────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info" if not settings.debug else "debug",
    )
