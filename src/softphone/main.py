"""
═══════════════════════════════════════════════════════════════════════════════
Softphone — Главная точка входа сервиса (Application Entry Point)
═══════════════════════════════════════════════════════════════════════════════

Фабрика приложения (Application Factory Pattern) для сервиса
провижининга Ringotel: роутеры, обработчик доменных ошибок, lifespan.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from softphone import __version__
from softphone.config import get_settings
from softphone.database import close_pool, get_pool
from softphone.exceptions import SoftphoneError

from softphone.api.health import router as health_router
from softphone.api.service import router as service_router

# ═══════════════════════════════════════════════════════════════════════════════
# Настройка логирования
# ═══════════════════════════════════════════════════════════════════════════════
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

STATUS_MAP = {
    "SOFTPHONE_NOT_FOUND": 404,
    "SOFTPHONE_VALIDATION_ERROR": 422,
    "SOFTPHONE_AUTH_ERROR": 401,
    "SOFTPHONE_AUTHZ_ERROR": 403,
    "SOFTPHONE_REMOTE_ERROR": 502,
}


# ═══════════════════════════════════════════════════════════════════════════════
# Lifespan — управление жизненным циклом
# ═══════════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan сервиса.

    Startup:
        1. Создаём пул соединений к PostgreSQL FusionPBX.
        2. При недоступности БД вне production — memory store;
           в production сервис не стартует.

    Shutdown:
        1. Закрываем пул БД.
    """
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())
    logger.info(f"🚀 Softphone provisioning v{__version__} starting...")

    try:
        await get_pool()
        logger.info("✅ FusionPBX database pool initialized")
    except Exception as e:
        if settings.app_env == "production":
            logger.error(f"❌ FusionPBX DB not available: {e}")
            raise
        logger.warning(f"⚠️  FusionPBX DB not available — activating memory store: {e}")
        from softphone.memory_store import activate_memory_store
        activate_memory_store()

    yield

    try:
        await close_pool()
    except Exception as e:
        logger.warning(f"DB pool close failed: {e}")
    logger.info("🛑 Softphone provisioning stopped")


# ═══════════════════════════════════════════════════════════════════════════════
# Фабрика приложения
# ═══════════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Создаёт и конфигурирует FastAPI-приложение."""
    settings = get_settings()

    _is_production = settings.app_env == "production"

    app = FastAPI(
        redirect_slashes=False,
        title="Softphone provisioning",
        description=(
            "Provisions Ringotel organizations, connections, users and SMS trunks "
            "for FusionPBX domains."
        ),
        version=__version__,
        lifespan=lifespan,
        docs_url=None if _is_production else "/docs",
        redoc_url=None if _is_production else "/redoc",
        openapi_url=None if _is_production else "/api/v1/openapi.json",
    )

    # ── CORS middleware ──────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
    )

    # ── Подключение API-роутеров ─────────────────────────────────────────
    v1_router = APIRouter(prefix="/api/v1")
    v1_router.include_router(service_router)
    v1_router.include_router(health_router)
    app.include_router(v1_router)

    # ── Глобальный обработчик SoftphoneError ─────────────────────────────
    @app.exception_handler(SoftphoneError)
    async def softphone_error_handler(request: Request, exc: SoftphoneError) -> JSONResponse:
        """Маппинг кодов на HTTP-статусы; ошибка Ringotel отдаётся как есть."""
        status_code = STATUS_MAP.get(exc.code, 500)
        return JSONResponse(
            status_code=status_code,
            content={
                "error": {
                    "code": exc.code,
                    "message": exc.message,
                    "details": exc.details,
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                }
            },
        )

    @app.get("/")
    async def root():
        return {
            "name": "Softphone provisioning",
            "version": __version__,
            "docs": "/docs",
            "api": {
                "v1": {
                    "health": "/api/v1/health",
                    "ringotel": "/api/v1/ringotel/{method}",
                },
            },
        }

    return app


# ═══════════════════════════════════════════════════════════════════════════════
# Module-level singleton
# ═══════════════════════════════════════════════════════════════════════════════
app = create_app()


def main() -> None:
    """Запускает сервис через Uvicorn."""
    settings = get_settings()
    logger.info(f"Starting softphone provisioning on {settings.api_host}:{settings.api_port}")
    uvicorn.run(
        "softphone.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
