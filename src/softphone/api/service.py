"""
softphone/api/service.py — Единая точка вызова операций провижининга.

POST /api/v1/ringotel/{method} с плоским JSON-объектом параметров.
Разрешены только методы из ``OPERATIONS``; параметры валидируются схемой
метода, тенант берётся из JWT. Ответ — ``{"result": ...}`` или ``{}``.
"""


from typing import Any, Awaitable, Callable

from fastapi import APIRouter, Body, Depends
from pydantic import ValidationError as PydanticValidationError

from softphone.adapters.ringotel_client import RingotelClient
from softphone.dependencies import get_current_claims, get_current_tenant, get_ringotel_client
from softphone.exceptions import AuthorizationError, NotFoundError, ValidationError
from softphone.models import requests as rq
from softphone.models.common import SoftphoneBase
from softphone.models.tenant import LocalTenant
from softphone.services import integration_service, org_service, rbac, user_service

router = APIRouter(prefix="/ringotel", tags=["ringotel"])

Handler = Callable[..., Awaitable[Any]]


async def _ringotel_extensions(tenant: LocalTenant, request: rq.NoParams, api: RingotelClient) -> dict:
    return {"result": await user_service.get_ringotel_extensions(tenant, api)}


OPERATIONS: dict[str, tuple[Handler, type[SoftphoneBase]]] = {
    # ── Организации ──
    "get_organization": (org_service.get_organization, rq.OrganizationLookup),
    "create_organization": (org_service.create_organization, rq.OrganizationCreate),
    "delete_organization": (org_service.delete_organization, rq.OrganizationRef),
    "update_organization_with_default_settings": (
        org_service.update_organization_with_default_settings, rq.OrganizationDefaults,
    ),
    "switch_organization_mode": (org_service.switch_organization_mode, rq.OrganizationDefaults),
    # ── Подключения ──
    "get_branches": (org_service.get_branches, rq.BranchList),
    "create_branch": (org_service.create_branch, rq.BranchCreate),
    "delete_branch": (org_service.delete_branch, rq.BranchRef),
    "update_branch_with_default_settings": (
        org_service.update_branch_with_default_settings, rq.BranchDefaults,
    ),
    "update_branch_with_updated_settings": (
        org_service.update_branch_with_updated_settings, rq.BranchSettings,
    ),
    "update_parks_with_updated_settings": (
        org_service.update_parks_with_updated_settings, rq.ParkSlots,
    ),
    # ── Пользователи ──
    "get_users": (user_service.get_users, rq.UserList),
    "users_state": (user_service.users_state, rq.UserList),
    "create_users": (user_service.create_users, rq.UsersCreate),
    "delete_user": (user_service.delete_user, rq.UserRef),
    "update_user": (user_service.update_user, rq.UserUpdate),
    "update_extension_name": (user_service.update_extension_name, rq.ExtensionNameUpdate),
    "resync_names": (user_service.resync_names, rq.UserExtensionRef),
    "resync_password": (user_service.resync_password, rq.UserExtensionRef),
    "activate_user": (user_service.activate_user, rq.UserExtensionRef),
    "deactivate_user": (user_service.deactivate_user, rq.UserRef),
    "detach_user": (user_service.detach_user, rq.UserDetach),
    "reset_user_password": (user_service.reset_user_password, rq.UserRef),
    "get_ringotel_extensions": (_ringotel_extensions, rq.NoParams),
    # ── Интеграции и SMS-транки ──
    "create_integration": (integration_service.create_integration, rq.IntegrationRef),
    "delete_integration": (integration_service.delete_integration, rq.IntegrationRef),
    "get_integration": (integration_service.get_integration, rq.TrunkList),
    "get_sms_trunk": (integration_service.get_sms_trunk, rq.TrunkList),
    "create_sms_trunk": (integration_service.create_sms_trunk, rq.TrunkCreate),
    "update_sms_trunk": (integration_service.update_sms_trunk, rq.TrunkUpdate),
    "delete_sms_trunk": (integration_service.delete_sms_trunk, rq.TrunkRef),
}


@router.post("/{method}", summary="Вызвать операцию провижининга Ringotel")
async def call_method(
    method: str,
    params: dict[str, Any] = Body(default={}),
    claims: dict = Depends(get_current_claims),
    tenant: LocalTenant = Depends(get_current_tenant),
    api: RingotelClient = Depends(get_ringotel_client),
):
    """Проверяет метод и разрешения, валидирует параметры и выполняет операцию."""
    operation = OPERATIONS.get(method)
    if operation is None:
        raise NotFoundError("method", method)

    missing = rbac.missing_permission(claims.get("permissions") or [], method)
    if missing:
        raise AuthorizationError(f"Permission '{missing}' required")

    handler, schema = operation
    try:
        request = schema.model_validate(params)
    except PydanticValidationError as exc:
        raise ValidationError(
            f"Invalid parameters for {method}",
            details={"errors": [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()]},
        ) from exc

    return await handler(tenant, request, api)
