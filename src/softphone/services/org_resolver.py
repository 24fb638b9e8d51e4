"""
softphone/services/org_resolver.py — Поиск организации Ringotel для тенанта.

Ringotel не хранит ссылку на домен FusionPBX, поэтому организация
находится по цепочке правил сравнения (см. ``_matches``). Исторически
организации создавались разными способами, отсюда несколько правил.
"""

from __future__ import annotations

import logging
from typing import Iterable

from softphone.models.ringotel import RemoteOrganization
from softphone.services.compactor import compact

logger = logging.getLogger(__name__)


def first_label(domain: str) -> str:
    """``acme.example.com`` → ``acme``."""
    return domain.split(".")[0]


def _matches(
    candidate: RemoteOrganization,
    local_domain: str,
    compacted_domain: str,
) -> bool:
    """Правила 2–6: первое выполненное правило даёт совпадение."""
    dotted = candidate.domain.replace("_", ".")
    local_label = first_label(local_domain)
    return (
        compacted_domain == candidate.domain
        or local_domain == candidate.name
        or dotted == local_domain
        or first_label(dotted) == local_label
        or candidate.domain.split("-")[0] == local_label
    )


def resolve(
    local_domain: str,
    organizations: Iterable[RemoteOrganization],
    domain_suffix: str,
    override_domain: str | None = None,
) -> RemoteOrganization | None:
    """
    Выбирает организацию Ringotel для домена FusionPBX.

    Приоритет:
        1. ``override_domain`` совпадает с ``domain`` кандидата — побеждает
           всегда, независимо от остальных правил.
        2–6. См. ``_matches``. При нескольких совпадениях возвращается
           последний кандидат в порядке ответа Ringotel.

    Returns:
        RemoteOrganization или None (тенант ещё не создан в Ringotel).
    """
    compacted_domain = compact(first_label(local_domain), domain_suffix)

    override_match: RemoteOrganization | None = None
    matched: list[RemoteOrganization] = []
    for candidate in organizations:
        if override_domain and candidate.domain == override_domain:
            override_match = candidate
        elif _matches(candidate, local_domain, compacted_domain):
            matched.append(candidate)

    if override_match is not None:
        return override_match
    if not matched:
        logger.info("No Ringotel organization matches domain %s", local_domain)
        return None
    if len(matched) > 1:
        logger.warning(
            "Domain %s matches %d Ringotel organizations (%s), using the last one",
            local_domain, len(matched), ", ".join(o.id for o in matched),
        )
    return matched[-1]


__all__ = ["first_label", "resolve"]
