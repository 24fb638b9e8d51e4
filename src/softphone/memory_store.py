"""
═══════════════════════════════════════════════════════════════════════════════
Softphone — In-Memory каталог extensions (замена FusionPBX DB)
═══════════════════════════════════════════════════════════════════════════════

In-memory реализация extension_repo + функция
``activate_memory_store()`` для monkey-patching.
Используется при недоступности базы FusionPBX вне production и в тестах.
"""

from __future__ import annotations

import logging
from uuid import UUID, uuid4

from softphone.models.tenant import LocalExtension

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Хранилище: domain_uuid → extensions
# ═══════════════════════════════════════════════════════════════════════════════
_extensions: dict[UUID, list[LocalExtension]] = {}


def add_extension(
    domain_uuid: UUID,
    extension: str,
    effective_caller_id_name: str = "",
    password: str = "",
    email: str | None = None,
    extension_uuid: UUID | None = None,
) -> LocalExtension:
    """Добавляет extension в память (заполнение для разработки и тестов)."""
    ext = LocalExtension(
        extension_uuid=extension_uuid or uuid4(),
        extension=extension,
        effective_caller_id_name=effective_caller_id_name,
        password=password,
        email=email,
    )
    _extensions.setdefault(domain_uuid, []).append(ext)
    logger.info("Memory store: added extension %s", extension)
    return ext


def clear() -> None:
    _extensions.clear()


# ═══════════════════════════════════════════════════════════════════════════════
# extension_repo in-memory
# ═══════════════════════════════════════════════════════════════════════════════

async def list_extensions(domain_uuid: UUID) -> list[LocalExtension]:
    return sorted(_extensions.get(domain_uuid, []), key=lambda e: e.extension)


async def get_extension(domain_uuid: UUID, extension: str) -> LocalExtension | None:
    for ext in _extensions.get(domain_uuid, []):
        if ext.extension == extension:
            return ext
    return None


# ═══════════════════════════════════════════════════════════════════════════════
# Активация in-memory хранилища (monkey-patching)
# ═══════════════════════════════════════════════════════════════════════════════

def activate_memory_store() -> None:
    """
    Подменяет функции в softphone.db.repositories.extension_repo.

    Вызывается из softphone.main → lifespan() при недоступности базы.
    """
    from softphone.db.repositories import extension_repo

    extension_repo.list_extensions = list_extensions
    extension_repo.get_extension = get_extension

    logger.warning(
        "🧠 Memory store ACTIVATED — extensions are in-memory (lost on restart)."
    )
