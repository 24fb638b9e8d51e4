"""
softphone/services/rbac.py — Разрешения FusionPBX для операций сервиса.

Разрешения приходят в claim ``permissions`` токена. Для всех операций
провижининга достаточно разрешения ``ringotel``; удаление организации
дополнительно требует ``ringotel_delete_organization``.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

BASE_PERMISSION = "ringotel"

# Дополнительные разрешения для отдельных методов
METHOD_PERMISSIONS: dict[str, str] = {
    "delete_organization": "ringotel_delete_organization",
}


def has_permission(permissions: list[str] | set[str], permission: str) -> bool:
    return permission in set(permissions or ())


def required_permissions(method: str) -> list[str]:
    """Разрешения, необходимые для вызова метода."""
    extra = METHOD_PERMISSIONS.get(method)
    return [BASE_PERMISSION, extra] if extra else [BASE_PERMISSION]


def missing_permission(permissions: list[str] | set[str], method: str) -> str | None:
    """Первое недостающее разрешение или None."""
    for permission in required_permissions(method):
        if not has_permission(permissions, permission):
            logger.warning("RBAC: permission '%s' denied for method %s", permission, method)
            return permission
    return None
