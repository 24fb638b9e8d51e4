"""
softphone/services/compactor.py — Сокращение домена под лимит Ringotel.

Домен организации Ringotel (имя + postfix) не длиннее 30 символов.
Длинное имя укорачивается по «слогам»: между каждой парой соседних
согласных ставится разделитель, последний кусок отбрасывается, остальные
склеиваются без разделителя. Шаг повторяется до выполнения лимита.

Результат используется и при создании организации, и при поиске уже
созданной, поэтому любое изменение алгоритма ломает сопоставление
с существующими организациями.
"""

from __future__ import annotations

import logging
import re

from softphone.config import MAX_REMOTE_DOMAIN_LENGTH
from softphone.exceptions import ValidationError

logger = logging.getLogger(__name__)

_CONSONANT_PAIR = re.compile(r"([b-df-hj-np-tv-z])([b-df-hj-np-tv-z])", re.IGNORECASE)
_SEPARATOR = "-"


def _drop_last_syllable(name: str) -> str | None:
    """Один шаг сокращения; None — если границ больше нет."""
    marked = _CONSONANT_PAIR.sub(rf"\1{_SEPARATOR}\2", name)
    segments = marked.split(_SEPARATOR)
    if len(segments) < 2:
        return None
    return "".join(segments[:-1])


def compact(name: str, suffix: str, limit: int = MAX_REMOTE_DOMAIN_LENGTH) -> str:
    """
    Возвращает ``name' + suffix`` длиной не более ``limit``.

    Каждый шаг строго укорачивает имя, поэтому число шагов ограничено
    длиной имени. Если границ между согласными не осталось, имя
    обрезается до свободного места.

    Raises:
        ValidationError: suffix сам по себе не помещается в лимит.
    """
    if len(suffix) > limit:
        raise ValidationError(
            f"Domain suffix is longer than {limit} characters",
            details={"suffix": suffix},
        )

    current = name
    for _ in range(len(name) + 1):
        if len(current) + len(suffix) <= limit:
            return current + suffix
        shorter = _drop_last_syllable(current)
        if shorter is None:
            break
        current = shorter

    truncated = current[: limit - len(suffix)]
    logger.debug("Compaction of %r fell back to truncation: %r", name, truncated)
    return truncated + suffix


__all__ = ["compact"]
