"""
softphone/api/health.py — Health check эндпоинт.

GET /api/v1/health — проверяет доступность базы FusionPBX.
"""

from fastapi import APIRouter

from softphone.database import check_connection

router = APIRouter(tags=["health"])


@router.get("/health", summary="Health check сервиса")
async def health():
    """Проверяет доступность FusionPBX DB."""
    db_ok = await check_connection()
    return {
        "status": "healthy" if db_ok else "degraded",
        "database": "connected" if db_ok else "disconnected",
        "service": "softphone",
    }
