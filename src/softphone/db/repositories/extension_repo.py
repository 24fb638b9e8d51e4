"""
softphone/db/repositories/extension_repo.py — Каталог extensions FusionPBX.

Только чтение ``v_extensions``. Функции модуля подменяются in-memory
реализацией (``softphone.memory_store``), если база недоступна.
"""

from __future__ import annotations

from typing import Any, Mapping
from uuid import UUID

from softphone.database import get_connection
from softphone.models.tenant import LocalExtension

# FusionPBX хранит пустое имя и пароль как NULL
_COLUMNS = """
    e.extension_uuid, e.extension,
    COALESCE(e.effective_caller_id_name, '') AS effective_caller_id_name,
    COALESCE(e.password, '') AS password,
    NULLIF(v.voicemail_mail_to, '') AS email
"""


def row_to_extension(row: Mapping[str, Any]) -> LocalExtension:
    return LocalExtension(**dict(row))


async def list_extensions(domain_uuid: UUID) -> list[LocalExtension]:
    """Все extensions домена."""
    async with get_connection() as conn:
        rows = await conn.fetch(
            f"""
            SELECT {_COLUMNS}
            FROM v_extensions e
            LEFT JOIN v_voicemails v
                ON v.domain_uuid = e.domain_uuid AND v.voicemail_id = e.extension
            WHERE e.domain_uuid = $1
            ORDER BY e.extension
            """,
            domain_uuid,
        )
        return [row_to_extension(r) for r in rows]


async def get_extension(domain_uuid: UUID, extension: str) -> LocalExtension | None:
    """Extension домена по номеру; None — если не найден."""
    async with get_connection() as conn:
        row = await conn.fetchrow(
            f"""
            SELECT {_COLUMNS}
            FROM v_extensions e
            LEFT JOIN v_voicemails v
                ON v.domain_uuid = e.domain_uuid AND v.voicemail_id = e.extension
            WHERE e.domain_uuid = $1 AND e.extension = $2
            """,
            domain_uuid, extension,
        )
        return row_to_extension(row) if row else None
