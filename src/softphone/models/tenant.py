"""
softphone/models/tenant.py — Локальные модели FusionPBX.

LocalTenant передаётся явно в каждую операцию вместо неявного
состояния сессии. LocalExtension — строка v_extensions (только чтение).
"""

import re
from uuid import UUID

from pydantic import ConfigDict, Field, field_validator

from softphone.models.common import SoftphoneBase

_NON_DIGITS = re.compile(r"\D")


def digits_only(value: str | None) -> str:
    """Оставляет только цифры: ключ сопоставления локальных и удалённых extensions."""
    return _NON_DIGITS.sub("", value or "")


class LocalTenant(SoftphoneBase):
    """Домен FusionPBX, от имени которого выполняется запрос."""

    model_config = ConfigDict(frozen=True)

    domain_name: str = Field(..., min_length=1, examples=["acme.example.com"])
    domain_uuid: UUID

    @property
    def first_label(self) -> str:
        return self.domain_name.split(".")[0]


class LocalExtension(SoftphoneBase):
    """Extension из v_extensions."""
    extension_uuid: UUID
    extension: str
    effective_caller_id_name: str = ""
    password: str = ""
    email: str | None = None
    username: str | None = None
    authname: str | None = None

    @field_validator("effective_caller_id_name", "password", mode="before")
    @classmethod
    def _null_as_empty(cls, v):
        """NULL в v_extensions — пустое имя или пароль."""
        return "" if v is None else v

    @property
    def digits(self) -> str:
        return digits_only(self.extension)
