"""
softphone/services/integration_service.py — SMS-интеграции и SMS-транки.

Интеграция (например, Bandwidth) включается на организации с учётными
данными из настроек. SMS-транк связывает номер с набором пользователей
Ringotel; обновление транка заменяет все его поля целиком.
"""

from __future__ import annotations

import logging
from typing import Any

from softphone.adapters.ringotel_client import RingotelClient, result_items
from softphone.config import SoftphoneSettings, get_settings
from softphone.models.enums import ServiceState
from softphone.models.requests import (
    IntegrationRef,
    TrunkCreate,
    TrunkList,
    TrunkRef,
    TrunkUpdate,
)
from softphone.models.ringotel import RemoteService, SmsTrunk
from softphone.models.tenant import LocalTenant

logger = logging.getLogger(__name__)


def _integration_params(profileid: str, settings: SoftphoneSettings) -> dict[str, Any]:
    return {
        "profileid": profileid,
        "Username": settings.integration_username,
        "Password": settings.integration_password,
        "Account_ID": settings.integration_account_id,
        "Application_ID": settings.integration_application_id,
    }


def active_integrations(services: list[RemoteService], providers: list[str]) -> list[RemoteService]:
    """Включённые сервисы, чей ``id`` совпадает с одним из провайдеров."""
    names = set(providers)
    return [s for s in services if s.state == ServiceState.ENABLED and s.id in names]


# ═══════════════════════════════════════════════════════════════════════════
# ИНТЕГРАЦИИ
# ═══════════════════════════════════════════════════════════════════════════


async def create_integration(
    tenant: LocalTenant,
    request: IntegrationRef,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    settings = settings or get_settings()
    logger.info("Enabling SMS integration for organization %s", request.profileid)
    return await api.create_integration(_integration_params(request.profileid, settings))


async def delete_integration(
    tenant: LocalTenant,
    request: IntegrationRef,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    settings = settings or get_settings()
    logger.info("Disabling SMS integration for organization %s", request.profileid)
    return await api.delete_integration(_integration_params(request.profileid, settings))


async def get_integration(
    tenant: LocalTenant,
    request: TrunkList,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    settings = settings or get_settings()
    response = await api.get_services({"orgid": request.orgid})
    services = [RemoteService.model_validate(s) for s in result_items(response)]
    active = active_integrations(services, settings.integration_providers)
    return {"result": [s.model_dump() for s in active]}


# ═══════════════════════════════════════════════════════════════════════════
# SMS-ТРАНКИ
# ═══════════════════════════════════════════════════════════════════════════


async def get_sms_trunk(
    tenant: LocalTenant,
    request: TrunkList,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    return await api.get_sms_trunks({"orgid": request.orgid})


async def create_sms_trunk(
    tenant: LocalTenant,
    request: TrunkCreate,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    trunk = SmsTrunk(
        orgid=request.orgid,
        name=request.name or request.number,
        number=request.number,
        users=request.users,
    )
    return await api.create_sms_trunk(trunk.model_dump(exclude_none=True))


async def update_sms_trunk(
    tenant: LocalTenant,
    request: TrunkUpdate,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    trunk = SmsTrunk(
        id=request.id,
        orgid=request.orgid,
        name=request.name,
        number=request.number,
        users=request.users,
    )
    return await api.update_sms_trunk(trunk.model_dump())


async def delete_sms_trunk(
    tenant: LocalTenant,
    request: TrunkRef,
    api: RingotelClient,
    settings: SoftphoneSettings | None = None,
) -> dict[str, Any]:
    return await api.delete_sms_trunk({"orgid": request.orgid, "id": request.id})
