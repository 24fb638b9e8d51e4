"""
softphone/services/provisioning.py — Построение payload'ов провижининга.

Чистые функции: (локальное состояние, предыдущее удалённое состояние,
параметры запроса) → payload для Ringotel API. Сетевых вызовов здесь нет,
поэтому один и тот же вход всегда даёт один и тот же payload и вызов
можно безопасно повторить.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from softphone.exceptions import ValidationError
from softphone.models.enums import UserStatus
from softphone.models.requests import (
    BranchSettings,
    OrganizationDefaults,
    UsersCreate,
    UserExtensionRef,
    UserUpdate,
)
from softphone.models.ringotel import CallPark, ParkSlot, ProvisioningProfile, RemoteBranch
from softphone.models.tenant import LocalExtension

logger = logging.getLogger(__name__)

DEFAULT_PARK_NUMBERS = ("5901", "5902", "5903")

# Пустое значение любого из этих полей означает «не менять», а не «очистить»
_SPARSE_FIELDS = ("name", "extension", "email", "password", "username", "authname", "mobile")


# ═══════════════════════════════════════════════════════════════════════════
# ПОДКЛЮЧЕНИЯ (BRANCHES)
# ═══════════════════════════════════════════════════════════════════════════


def build_park_slots(park_numbers: Iterable[str]) -> list[ParkSlot]:
    """Слоты в порядке вызывающей стороны: ``5906`` → ``Park 06``."""
    return [ParkSlot(alias=f"Park {str(n)[-2:]}", slot=str(n)) for n in park_numbers]


def default_branch_profile(max_registration: int) -> ProvisioningProfile:
    """Полный профиль с безопасными значениями для нового подключения."""
    return ProvisioningProfile(
        maxregs=max_registration,
        callpark=CallPark(slots=build_park_slots(DEFAULT_PARK_NUMBERS)),
    )


def branch_defaults_payload(orgid: str, branch_id: str, max_registration: int) -> dict[str, Any]:
    return {
        "orgid": orgid,
        "id": branch_id,
        "provision": default_branch_profile(max_registration).model_dump(),
    }


def branch_create_payload(
    orgid: str,
    name: str,
    address: str,
    protocol: str,
    maxregs: int,
) -> dict[str, Any]:
    return {
        "orgid": orgid,
        "maxregs": maxregs,
        "name": name,
        "address": address,
        "protocol": protocol,
    }


def branch_settings_payload(request: BranchSettings) -> dict[str, Any]:
    """
    Обновление настроек подключения.

    Включаются только переданные поля; ``address`` собирается как
    ``address:port``. Без ``maxregs`` Ringotel портит профиль, поэтому
    его отсутствие — ошибка валидации.
    """
    if request.maxregs is None:
        raise ValidationError("maxregs is required to update a branch", details={"id": request.id})

    provision: dict[str, Any] = {"maxregs": request.maxregs}
    for field in ("multitenant", "inboundFormat", "protocol", "nosrtp", "noverify"):
        value = getattr(request, field)
        if value is not None:
            provision[field] = value

    payload: dict[str, Any] = {"orgid": request.orgid, "id": request.id, "provision": provision}
    if request.name is not None:
        payload["name"] = request.name
    if request.country is not None:
        payload["country"] = request.country
    if request.address is not None:
        payload["address"] = f"{request.address}:{request.port}" if request.port else request.address
    return payload


def park_slots_payload(
    orgid: str,
    branch_id: str,
    park_numbers: Sequence[str],
    max_registration: int,
    name: str | None = None,
) -> dict[str, Any]:
    """Полная замена слотов парковки; предыдущие слоты не сохраняются."""
    callpark = CallPark(slots=build_park_slots(park_numbers))
    payload: dict[str, Any] = {
        "orgid": orgid,
        "id": branch_id,
        "provision": {
            "callpark": callpark.model_dump(),
            "maxregs": max_registration,
        },
    }
    if name is not None:
        payload["name"] = name
    return payload


def post_switch_branch_payload(orgid: str, branch: RemoteBranch, fallback_maxregs: int) -> dict[str, Any]:
    """Повторно отправляет прежний ``maxregs`` подключения после смены тарифа."""
    maxregs = branch.maxregs
    if maxregs is None:
        logger.warning("Branch %s has no maxregs, using default %d", branch.id, fallback_maxregs)
        maxregs = fallback_maxregs
    return {"orgid": orgid, "id": branch.id, "provision": {"maxregs": maxregs}}


# ═══════════════════════════════════════════════════════════════════════════
# ОРГАНИЗАЦИИ
# ═══════════════════════════════════════════════════════════════════════════


def organization_defaults_payload(
    request: OrganizationDefaults,
    emailcc: str,
    server_name: str | None = None,
) -> dict[str, Any]:
    params: dict[str, Any] = {"emailcc": emailcc}
    tag = request.tag or server_name
    if tag:
        params["tags"] = [tag]
    payload: dict[str, Any] = {"id": request.orgid, "params": params}
    if request.packageid:
        payload["packageid"] = request.packageid
    return payload


# ═══════════════════════════════════════════════════════════════════════════
# ПОЛЬЗОВАТЕЛИ
# ═══════════════════════════════════════════════════════════════════════════


def create_users_payload(request: UsersCreate, extensions: Iterable[LocalExtension]) -> dict[str, Any]:
    """
    Пакет createUsers: по одному пользователю на выбранный extension.

    Выбор без ``create`` или с extension_uuid, которого нет локально,
    пропускается.
    """
    by_uuid = {str(ext.extension_uuid): ext for ext in extensions}
    users: list[dict[str, Any]] = []
    for selection in request.preusers:
        if not selection.create:
            continue
        ext = by_uuid.get(selection.extension_uuid)
        if ext is None:
            logger.warning("Extension %s not found locally, skipping", selection.extension_uuid)
            continue
        user: dict[str, Any] = {
            "name": ext.effective_caller_id_name,
            "domain": request.orgdomain,
            "branchname": request.branchname,
            "status": int(UserStatus.ACTIVE if selection.active else UserStatus.INACTIVE),
            "extension": ext.extension,
            "username": ext.extension,
            "password": ext.password,
            "authname": ext.extension,
        }
        if selection.email:
            user["email"] = selection.email
        users.append(user)

    return {
        "orgid": request.orgid,
        "branchid": request.branchid,
        "branchname": request.branchname,
        "orgdomain": request.orgdomain,
        "users": users,
    }


def update_user_payload(request: UserUpdate) -> dict[str, Any]:
    """
    Разреженное обновление пользователя.

    name, extension, email, password, username, authname, mobile —
    только непустые переданные значения, пустое значение не меняет поле;
    status — всегда, по умолчанию 0.
    """
    sent = request.model_fields_set
    payload: dict[str, Any] = {"orgid": request.orgid, "id": request.id}

    for field in _SPARSE_FIELDS:
        value = getattr(request, field)
        if field in sent and value:
            payload[field] = value

    payload["status"] = request.status if request.status is not None else int(UserStatus.INACTIVE)
    return payload


def resync_name_payload(orgid: str, user_id: str, extension: LocalExtension) -> dict[str, Any]:
    return {"orgid": orgid, "id": user_id, "name": extension.effective_caller_id_name}


def resync_password_payload(orgid: str, user_id: str, extension: LocalExtension) -> dict[str, Any]:
    return {"orgid": orgid, "id": user_id, "password": extension.password}


def activate_user_payload(request: UserExtensionRef, extension: LocalExtension) -> dict[str, Any]:
    """Полный payload активации: локальное имя и учётные данные, status = 1."""
    payload: dict[str, Any] = {
        "orgid": request.orgid,
        "id": request.id,
        "name": extension.effective_caller_id_name,
        "extension": request.extension or extension.extension,
        "username": extension.username or extension.extension,
        "authname": extension.authname or extension.extension,
        "status": int(UserStatus.ACTIVE),
    }
    email = request.email or extension.email
    if email:
        payload["email"] = email
    return payload
