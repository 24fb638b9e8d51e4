"""
softphone/services/user_service.py — Пользователи Ringotel ↔ extensions FusionPBX.

Пользователь Ringotel сопоставляется с extension по цифрам номера
(``digits_only``), а не по строковому равенству.

Если нужный локальный extension не найден, операция ничего не отправляет
в Ringotel и возвращает пустой результат ``{}``. Ошибки Ringotel
поднимаются без изменений (``RemoteAPIError``).
"""

from __future__ import annotations

import logging
from typing import Any

from softphone.adapters.ringotel_client import RingotelClient, result_items
from softphone.config import SoftphoneSettings
from softphone.db.repositories import extension_repo
from softphone.models.requests import (
    ExtensionNameUpdate,
    UserDetach,
    UserExtensionRef,
    UserList,
    UserRef,
    UsersCreate,
    UserUpdate,
)
from softphone.models.enums import UserStatus
from softphone.models.ringotel import RemoteUser
from softphone.models.tenant import LocalTenant, digits_only
from softphone.services import provisioning
from softphone.services.org_service import resolve_organization

logger = logging.getLogger(__name__)


async def _resolve_orgid(
    tenant: LocalTenant,
    orgid: str | None,
    api: RingotelClient,
    settings: SoftphoneSettings | None,
) -> str | None:
    if orgid:
        return orgid
    org = await resolve_organization(tenant, api, settings)
    return org.id if org else None


# ═══════════════════════════════════════════════════════════════════════════
# ЧТЕНИЕ
# ═══════════════════════════════════════════════════════════════════════════


async def get_users(
    tenant: LocalTenant,
    request: UserList,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    """Пользователи организации с флагом ``extension_exists``."""
    orgid = await _resolve_orgid(tenant, request.orgid, api, settings)
    if orgid is None:
        return {}

    params: dict[str, Any] = {"orgid": orgid}
    if request.branchid:
        params["branchid"] = request.branchid
    response = await api.get_users(params)

    local = {ext.digits for ext in await extension_repo.list_extensions(tenant.domain_uuid)}
    users = result_items(response)
    for user in users:
        user["extension_exists"] = digits_only(str(user.get("extension", ""))) in local
    return {**response, "result": users}


async def users_state(
    tenant: LocalTenant,
    request: UserList,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    """Только ``id`` и ``state`` пользователей (для частого опроса UI)."""
    params = {"orgid": request.orgid, "branchid": request.branchid}
    response = await api.get_users({k: v for k, v in params.items() if v})
    return {"result": [{"id": u.get("id"), "state": u.get("state")} for u in result_items(response)]}


async def get_ringotel_extensions(
    tenant: LocalTenant,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> list[dict[str, Any]]:
    """``[{extension, status}]`` пользователей организации тенанта."""
    orgid = await _resolve_orgid(tenant, None, api, settings)
    if orgid is None:
        return []
    response = await api.get_users({"orgid": orgid})
    return [
        {"extension": u.get("extension"), "status": u.get("status")}
        for u in result_items(response)
    ]


# ═══════════════════════════════════════════════════════════════════════════
# СОЗДАНИЕ / УДАЛЕНИЕ
# ═══════════════════════════════════════════════════════════════════════════


async def create_users(
    tenant: LocalTenant,
    request: UsersCreate,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    """Создаёт пользователей для выбранных extensions одним пакетом."""
    extensions = await extension_repo.list_extensions(tenant.domain_uuid)
    payload = provisioning.create_users_payload(request, extensions)
    if not payload["users"]:
        logger.info("No extensions selected for creation in %s", tenant.domain_name)
        return {}

    response = await api.create_users(payload)
    created = [u["extension"] for u in payload["users"]]
    logger.info("Created %d Ringotel users in branch %s", len(created), request.branchid)
    return response


async def delete_user(
    tenant: LocalTenant,
    request: UserRef,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    return await api.delete_user({"id": request.id, "orgid": request.orgid})


async def detach_user(
    tenant: LocalTenant,
    request: UserDetach,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    return await api.update_user(
        {"id": request.id, "userid": request.userid, "orgid": request.orgid}
    )


# ═══════════════════════════════════════════════════════════════════════════
# ОБНОВЛЕНИЕ
# ═══════════════════════════════════════════════════════════════════════════


async def update_user(
    tenant: LocalTenant,
    request: UserUpdate,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    """Разреженное обновление; требует существующий локальный extension."""
    extension = await extension_repo.get_extension(tenant.domain_uuid, request.extension)
    if extension is None:
        logger.info("Extension %s not found in %s, update skipped", request.extension, tenant.domain_name)
        return {}
    return await api.update_user(provisioning.update_user_payload(request))


async def update_extension_name(
    tenant: LocalTenant,
    request: ExtensionNameUpdate,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    """
    Переносит новое имя extension в Ringotel.

    Вызывается после изменения extension в FusionPBX: находит
    организацию тенанта, её пользователя с тем же номером и обновляет
    имя, сохраняя текущий статус пользователя.
    """
    if not request.name:
        return {}
    org = await resolve_organization(tenant, api, settings)
    if org is None:
        return {}

    wanted = digits_only(request.extension)
    users = [RemoteUser.model_validate(u) for u in result_items(await api.get_users({"orgid": org.id}))]
    selected = [u for u in users if u.digits == wanted]
    if not selected:
        return {}
    user = selected[-1]

    update = UserUpdate(
        orgid=org.id,
        id=user.id,
        extension=request.extension,
        name=request.name,
        status=int(UserStatus.ACTIVE if user.status == UserStatus.ACTIVE else UserStatus.INACTIVE),
    )
    return await update_user(tenant, update, api, settings)


async def resync_names(
    tenant: LocalTenant,
    request: UserExtensionRef,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    extension = await extension_repo.get_extension(tenant.domain_uuid, request.extension)
    if extension is None:
        return {}
    return await api.update_user(
        provisioning.resync_name_payload(request.orgid, request.id, extension)
    )


async def resync_password(
    tenant: LocalTenant,
    request: UserExtensionRef,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    extension = await extension_repo.get_extension(tenant.domain_uuid, request.extension)
    if extension is None:
        return {}
    return await api.update_user(
        provisioning.resync_password_payload(request.orgid, request.id, extension)
    )


async def activate_user(
    tenant: LocalTenant,
    request: UserExtensionRef,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    extension = await extension_repo.get_extension(tenant.domain_uuid, request.extension)
    if extension is None:
        return {}
    return await api.update_user(provisioning.activate_user_payload(request, extension))


async def deactivate_user(
    tenant: LocalTenant,
    request: UserRef,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    return await api.deactivate_user({"id": request.id, "orgid": request.orgid})


async def reset_user_password(
    tenant: LocalTenant,
    request: UserRef,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    return await api.reset_user_password({"id": request.id, "orgid": request.orgid})
