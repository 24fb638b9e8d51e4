"""
═══════════════════════════════════════════════════════════════════════════════
Softphone — Иерархия доменных ошибок (Custom Exception Hierarchy)
═══════════════════════════════════════════════════════════════════════════════

Базовый класс ``SoftphoneError``.
HTTP-маппинг кодов выполняется в ``softphone.main:softphone_error_handler``.

Отсутствие локального extension — не ошибка для вызывающей стороны:
сервисы возвращают пустой результат. ``NotFoundError`` означает
неизвестный метод API.
"""

from __future__ import annotations

from typing import Any


class SoftphoneError(Exception):
    """
    Базовое исключение для всех доменных ошибок сервиса.

    Атрибуты
    ────────
        message (str):  Описание ошибки. Передаётся клиенту в JSON.
        code (str):     Строковый код. Используется для маппинга на HTTP-статус.
        details (dict): Дополнительные данные (entity, id и т.д.).
    """

    def __init__(
        self,
        message: str,
        code: str = "SOFTPHONE_ERROR",
        details: dict | None = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)


class AuthenticationError(SoftphoneError):
    """Ошибка аутентификации: 401 Unauthorized."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="SOFTPHONE_AUTH_ERROR")


class AuthorizationError(SoftphoneError):
    """Ошибка авторизации: 403 Forbidden."""

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message, code="SOFTPHONE_AUTHZ_ERROR")


class NotFoundError(SoftphoneError):
    """Сущность не найдена: 404 Not Found."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(
            message=f"{entity} not found: {entity_id}",
            code="SOFTPHONE_NOT_FOUND",
            details={"entity": entity, "id": entity_id},
        )


class ValidationError(SoftphoneError):
    """Ошибка доменной валидации: 422 Unprocessable Entity."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, code="SOFTPHONE_VALIDATION_ERROR", details=details)


class RemoteAPIError(SoftphoneError):
    """
    Ошибка Ringotel API: 502 Bad Gateway.

    ``error`` — конверт ошибки удалённого сервиса без изменений
    (или описание транспортной ошибки). Повторов и отката нет.
    """

    def __init__(self, method: str, error: Any, status_code: int | None = None):
        self.method = method
        self.error = error
        self.status_code = status_code
        super().__init__(
            message=f"Ringotel API call {method} failed",
            code="SOFTPHONE_REMOTE_ERROR",
            details={"method": method, "error": error, "status_code": status_code},
        )


__all__ = [
    "SoftphoneError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ValidationError",
    "RemoteAPIError",
]
