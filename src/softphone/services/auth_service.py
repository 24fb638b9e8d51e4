"""
softphone/services/auth_service.py — Проверка JWT платформы.

Токены выпускает платформа (FusionPBX-портал). Сервис только проверяет
подпись и срок действия и извлекает из claims контекст тенанта:
``domain_name``, ``domain_uuid``, ``permissions``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from uuid import UUID

from jose import JWTError, jwt

from softphone.config import SoftphoneSettings, get_settings
from softphone.exceptions import AuthenticationError
from softphone.models.tenant import LocalTenant

logger = logging.getLogger(__name__)

_public_key_cache: str | None = None


def _get_jwt_verify_key(settings: SoftphoneSettings) -> tuple[str, list[str]]:
    """
    Возвращает ключ проверки подписи и допустимые алгоритмы.

    Приоритет:
    1. RSA public key (из файла jwt_public_key_path) → RS256
    2. Shared secret (jwt_secret_key) → jwt_algorithm
    """
    global _public_key_cache
    if settings.jwt_public_key_path:
        if _public_key_cache is None:
            p = Path(settings.jwt_public_key_path)
            if p.is_file():
                _public_key_cache = p.read_text(encoding="utf-8")
                logger.info("JWT verification: public key loaded from %s", p)
            else:
                logger.warning("JWT public key file not found: %s, falling back to shared secret", p)
                return settings.jwt_secret_key, [settings.jwt_algorithm]
        return _public_key_cache, ["RS256"]
    return settings.jwt_secret_key, [settings.jwt_algorithm]


def decode_token(token: str, settings: SoftphoneSettings | None = None) -> dict:
    """Декодирует и проверяет JWT. Raises AuthenticationError."""
    settings = settings or get_settings()
    key, algorithms = _get_jwt_verify_key(settings)
    try:
        return jwt.decode(token, key, algorithms=algorithms)
    except JWTError as exc:
        raise AuthenticationError(f"Invalid token: {exc}") from exc


def tenant_from_claims(claims: dict) -> LocalTenant:
    """Строит LocalTenant из claims токена."""
    domain_name = claims.get("domain_name")
    domain_uuid = claims.get("domain_uuid")
    if not domain_name or not domain_uuid:
        raise AuthenticationError("Token has no domain_name/domain_uuid claims")
    try:
        return LocalTenant(domain_name=domain_name, domain_uuid=UUID(str(domain_uuid)))
    except ValueError as exc:
        raise AuthenticationError("Token has an invalid domain_uuid claim") from exc
