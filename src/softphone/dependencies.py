"""
═══════════════════════════════════════════════════════════════════════════════
Softphone — Зависимости FastAPI (Dependency Injection)
═══════════════════════════════════════════════════════════════════════════════

``get_current_claims()`` / ``get_current_tenant()`` — контекст тенанта
из JWT, ``get_ringotel_client()`` — клиент Ringotel на время запроса.
"""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException, status

from softphone.adapters.ringotel_client import RingotelClient
from softphone.exceptions import AuthenticationError
from softphone.models.tenant import LocalTenant
from softphone.services.auth_service import decode_token, tenant_from_claims


async def get_current_claims(authorization: str | None = Header(None)) -> dict:
    """
    Извлекает и валидирует JWT-токен из заголовка ``Authorization``.

    Raises:
        HTTPException(401): токен отсутствует или невалиден.
    """
    # ── Шаг 1: наличие заголовка ──
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header is required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # ── Шаг 2: формат "Bearer <token>" ──
    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header must start with 'Bearer'",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # ── Шаг 3: декодирование JWT ──
    try:
        return decode_token(authorization[7:])
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=exc.message,
        ) from exc


async def get_current_tenant(claims: dict = Depends(get_current_claims)) -> LocalTenant:
    """LocalTenant из claims ``domain_name`` / ``domain_uuid``."""
    try:
        return tenant_from_claims(claims)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=exc.message,
        ) from exc


def get_ringotel_client() -> RingotelClient:
    """Клиент Ringotel с настройками по умолчанию."""
    return RingotelClient()
