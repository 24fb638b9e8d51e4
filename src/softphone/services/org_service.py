"""
softphone/services/org_service.py — Организации и подключения Ringotel.

Организация тенанта находится через ``org_resolver`` и только после этого
выполняются операции над подключениями. Создание организации сначала
ищет существующую, чтобы не плодить дубликаты. Гонка двух параллельных
запросов «поиск → создание» не исключена: блокировок сервис не держит.
"""

from __future__ import annotations

import logging
from typing import Any

from softphone.adapters.ringotel_client import RingotelClient, result_items
from softphone.config import SoftphoneSettings, get_settings
from softphone.models.requests import (
    BranchCreate,
    BranchDefaults,
    BranchList,
    BranchRef,
    BranchSettings,
    OrganizationCreate,
    OrganizationDefaults,
    OrganizationLookup,
    OrganizationRef,
    ParkSlots,
)
from softphone.models.ringotel import RemoteBranch, RemoteOrganization
from softphone.models.tenant import LocalTenant
from softphone.services import provisioning
from softphone.services.compactor import compact
from softphone.services.org_resolver import resolve

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# ОРГАНИЗАЦИИ
# ═══════════════════════════════════════════════════════════════════════════


async def resolve_organization(
    tenant: LocalTenant,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
    domain_name: str | None = None,
) -> RemoteOrganization | None:
    """Находит организацию Ringotel для домена (по умолчанию — домена тенанта)."""
    settings = settings or get_settings()
    response = await api.get_organizations()
    organizations = [RemoteOrganization.model_validate(o) for o in result_items(response)]
    return resolve(
        domain_name or tenant.domain_name,
        organizations,
        settings.domain_name_postfix,
        settings.ringotel_override_unique_organization_domain,
    )


async def get_organization(
    tenant: LocalTenant,
    request: OrganizationLookup,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    org = await resolve_organization(tenant, api, settings, request.domain_name)
    if org is None:
        return {}
    return {"result": org.model_dump()}


async def create_organization(
    tenant: LocalTenant,
    request: OrganizationCreate,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    """Создаёт организацию тенанта или возвращает уже существующую."""
    settings = settings or get_settings()

    existing = await resolve_organization(tenant, api, settings)
    if existing is not None:
        logger.info("Organization for %s already exists: %s", tenant.domain_name, existing.id)
        return {"result": existing.model_dump()}

    if request.domain:
        domain = request.domain + settings.domain_name_postfix
    else:
        domain = compact(tenant.first_label, settings.domain_name_postfix)

    params = {
        "name": request.name,
        "domain": domain,
        "region": request.region or settings.ringotel_organization_region,
        "adminlogin": request.adminlogin,
        "adminpassw": request.adminpassw,
    }
    response = await api.create_organization(params)

    logger.info("Created Ringotel organization %s for %s", domain, tenant.domain_name)
    return response


async def delete_organization(
    tenant: LocalTenant,
    request: OrganizationRef,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    response = await api.delete_organization({"id": request.id})
    logger.info("Deleted Ringotel organization %s (%s)", request.id, tenant.domain_name)
    return response


async def update_organization_with_default_settings(
    tenant: LocalTenant,
    request: OrganizationDefaults,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    settings = settings or get_settings()
    payload = provisioning.organization_defaults_payload(
        request, settings.organization_default_emailcc, settings.server_name,
    )
    return await api.update_organization(payload)


async def switch_organization_mode(
    tenant: LocalTenant,
    request: OrganizationDefaults,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    """
    Смена режима (тарифа) организации.

    Алгоритм:
        1. Читаем текущие подключения (до смены тарифа).
        2. Обновляем настройки организации (теги, emailcc, packageid).
        3. Для каждого подключения повторно отправляем его прежний
           ``maxregs`` — смена тарифа не должна сбрасывать лимиты.
    """
    settings = settings or get_settings()

    # ── Шаг 1: снимок подключений ──
    branches = [
        RemoteBranch.model_validate(b)
        for b in result_items(await api.get_branches({"orgid": request.orgid}))
    ]

    # ── Шаг 2: настройки организации ──
    switched = await update_organization_with_default_settings(tenant, request, api, settings)

    # ── Шаг 3: восстановление maxregs ──
    restored = []
    for branch in branches:
        payload = provisioning.post_switch_branch_payload(
            request.orgid, branch, settings.max_registration,
        )
        restored.append(await api.update_branch(payload))

    logger.info(
        "Switched organization %s mode, restored maxregs on %d branches",
        request.orgid, len(branches),
    )
    return {"switch": switched, "branches": restored}


# ═══════════════════════════════════════════════════════════════════════════
# ПОДКЛЮЧЕНИЯ (BRANCHES)
# ═══════════════════════════════════════════════════════════════════════════


async def get_branches(
    tenant: LocalTenant,
    request: BranchList,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    return await api.get_branches({"orgid": request.orgid})


async def create_branch(
    tenant: LocalTenant,
    request: BranchCreate,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    """
    Создаёт подключение; имя и адрес по умолчанию — домен тенанта.

    С ``apply_defaults`` новому подключению сразу отправляется
    профиль по умолчанию (updateBranch).
    """
    settings = settings or get_settings()
    payload = provisioning.branch_create_payload(
        orgid=request.orgid,
        name=request.connection_name or tenant.domain_name,
        address=request.connection_domain or tenant.domain_name,
        protocol=request.protocol or settings.default_connection_protocol,
        maxregs=request.maxregs or settings.max_registration,
    )
    response = await api.create_branch(payload)

    branch_id = (response.get("result") or {}).get("id") if request.apply_defaults else None
    if branch_id:
        await api.update_branch(
            provisioning.branch_defaults_payload(request.orgid, str(branch_id), payload["maxregs"])
        )
    return response


async def delete_branch(
    tenant: LocalTenant,
    request: BranchRef,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    return await api.delete_branch({"id": request.id, "orgid": request.orgid})


async def update_branch_with_default_settings(
    tenant: LocalTenant,
    request: BranchDefaults,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    settings = settings or get_settings()
    payload = provisioning.branch_defaults_payload(
        request.orgid, request.branchid, settings.max_registration,
    )
    return await api.update_branch(payload)


async def update_branch_with_updated_settings(
    tenant: LocalTenant,
    request: BranchSettings,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    return await api.update_branch(provisioning.branch_settings_payload(request))


async def update_parks_with_updated_settings(
    tenant: LocalTenant,
    request: ParkSlots,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    settings = settings or get_settings()
    payload = provisioning.park_slots_payload(
        request.orgid,
        request.id,
        request.park_array,
        settings.max_registration,
        name=request.name,
    )
    return await api.update_branch(payload)


__all__ = [
    "resolve_organization",
    "get_organization",
    "create_organization",
    "delete_organization",
    "update_organization_with_default_settings",
    "switch_organization_mode",
    "get_branches",
    "create_branch",
    "delete_branch",
    "update_branch_with_default_settings",
    "update_branch_with_updated_settings",
    "update_parks_with_updated_settings",
]
