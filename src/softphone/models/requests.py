"""
softphone/models/requests.py — Схемы запросов операций провижининга.

Каждая операция принимает плоский набор параметров (key-value), который
валидируется своей схемой. В разреженных обновлениях пустая строка
равнозначна отсутствию поля: Ringotel получает только непустые значения.
"""

from __future__ import annotations

from pydantic import AliasChoices, Field, field_validator

from softphone.models.common import SoftphoneBase


# ═══════════════════════════════════════════════════════════════════════════
# ОРГАНИЗАЦИИ
# ═══════════════════════════════════════════════════════════════════════════


class OrganizationLookup(SoftphoneBase):
    """Поиск организации; по умолчанию — домен текущего тенанта."""
    domain_name: str | None = None


class OrganizationCreate(SoftphoneBase):
    name: str = Field(..., min_length=1)
    domain: str | None = Field(default=None, description="Explicit domain, postfix is appended")
    region: str | None = None
    adminlogin: str = ""
    adminpassw: str = ""


class OrganizationRef(SoftphoneBase):
    id: str


class OrganizationDefaults(SoftphoneBase):
    """Параметры updateOrganization: тег, тариф (packageid)."""
    orgid: str
    tag: str | None = None
    packageid: int | None = None


# ═══════════════════════════════════════════════════════════════════════════
# ПОДКЛЮЧЕНИЯ (BRANCHES)
# ═══════════════════════════════════════════════════════════════════════════


class BranchList(SoftphoneBase):
    orgid: str


class BranchCreate(SoftphoneBase):
    orgid: str
    maxregs: int | None = Field(default=None, ge=1)
    connection_name: str | None = None
    connection_domain: str | None = None
    protocol: str | None = None
    apply_defaults: bool = False


class BranchRef(SoftphoneBase):
    orgid: str
    id: str


class BranchDefaults(SoftphoneBase):
    orgid: str
    branchid: str


class BranchSettings(SoftphoneBase):
    """
    Обновление настроек подключения.

    Перезаписываются только переданные поля. ``maxregs`` обязателен
    для updateBranch и проверяется при построении payload.
    """
    orgid: str
    id: str
    name: str | None = None
    address: str | None = None
    port: str | None = None
    country: str | None = None
    inboundFormat: str | None = None
    multitenant: bool | None = None
    protocol: str | None = None
    nosrtp: bool | None = None
    noverify: bool | None = None
    maxregs: int | None = Field(default=None, ge=1)


class ParkSlots(SoftphoneBase):
    """Новый набор слотов парковки — полностью заменяет предыдущий."""
    orgid: str
    id: str
    name: str | None = None
    park_array: list[str] = Field(default_factory=list)

    @field_validator("park_array", mode="before")
    @classmethod
    def _coerce_numbers(cls, v):
        if isinstance(v, (list, tuple)):
            return [str(p).strip() for p in v]
        return v


# ═══════════════════════════════════════════════════════════════════════════
# ПОЛЬЗОВАТЕЛИ
# ═══════════════════════════════════════════════════════════════════════════


class UserList(SoftphoneBase):
    orgid: str | None = None
    branchid: str | None = None


class UserSelection(SoftphoneBase):
    """Выбор extension в мастере создания пользователей."""
    extension_uuid: str
    create: bool = False
    active: bool = False
    email: str | None = None


class UsersCreate(SoftphoneBase):
    orgid: str
    branchid: str
    branchname: str
    orgdomain: str
    preusers: list[UserSelection] = Field(default_factory=list)


class UserRef(SoftphoneBase):
    orgid: str
    id: str


class UserExtensionRef(SoftphoneBase):
    """Пользователь Ringotel + номер локального extension для сверки."""
    orgid: str
    id: str
    extension: str
    email: str | None = None


class UserUpdate(SoftphoneBase):
    """
    Разреженное обновление пользователя.

    ``extension`` — одновременно ключ поиска локального extension
    и новое значение поля.
    """
    orgid: str
    id: str
    extension: str
    name: str | None = None
    email: str | None = None
    password: str | None = None
    username: str | None = None
    authname: str | None = None
    mobile: str | None = None
    status: int | None = Field(default=None, ge=0, le=1)


class UserDetach(SoftphoneBase):
    orgid: str
    id: str
    userid: str


class ExtensionNameUpdate(SoftphoneBase):
    extension: str
    name: str | None = None


# ═══════════════════════════════════════════════════════════════════════════
# ИНТЕГРАЦИИ И SMS-ТРАНКИ
# ═══════════════════════════════════════════════════════════════════════════


class IntegrationRef(SoftphoneBase):
    profileid: str = Field(..., validation_alias=AliasChoices("profileid", "orgid"))


class TrunkList(SoftphoneBase):
    orgid: str


class TrunkCreate(SoftphoneBase):
    orgid: str
    number: str = Field(..., min_length=1)
    name: str | None = None
    users: set[str] = Field(..., min_length=1)


class TrunkUpdate(SoftphoneBase):
    orgid: str
    id: str
    name: str
    number: str = Field(..., min_length=1)
    users: set[str] = Field(default_factory=set)


class TrunkRef(SoftphoneBase):
    orgid: str
    id: str


class NoParams(SoftphoneBase):
    """Операция без параметров (тенант берётся из токена)."""
