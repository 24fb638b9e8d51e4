"""
softphone/models/enums.py — Перечисления домена.

    • UserStatus — статус пользователя Ringotel (1 — активен, 0 — нет)
    • ServiceState — состояние сервиса/интеграции организации
"""

from enum import IntEnum


class UserStatus(IntEnum):
    """Статус пользователя Ringotel."""
    INACTIVE = 0
    ACTIVE = 1


class ServiceState(IntEnum):
    """Состояние сервиса в списке getServices."""
    DISABLED = 0
    ENABLED = 1
