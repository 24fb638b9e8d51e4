"""
softphone/adapters/ringotel_client.py — Клиент Ringotel Admin API.

Ringotel принимает JSON-RPC-подобные запросы: ``POST <api>`` с телом
``{"method": ..., "params": {...}}`` и Bearer-токеном. Ответ —
``{"result": ...}`` либо конверт ``{"error": {...}}``.

Клиент не делает повторов: любая ошибка (HTTP, транспорт, конверт
ошибки) поднимается как ``RemoteAPIError`` без изменений.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from softphone.config import get_settings
from softphone.exceptions import RemoteAPIError

logger = logging.getLogger(__name__)


class RingotelClient:
    """Тонкий авторизованный клиент Ringotel API."""

    def __init__(
        self,
        api_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.api_url = api_url or settings.ringotel_api
        self.token = token if token is not None else settings.ringotel_token
        self.timeout = timeout or settings.ringotel_timeout_seconds
        self._transport = transport

    async def call(self, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Выполняет метод API и возвращает тело ответа (``{"result": ...}``)."""
        body = {"method": method, "params": params or {}}
        headers = {"Authorization": f"Bearer {self.token}"}
        logger.info("Ringotel API call: %s", method)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.api_url, json=body, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("Ringotel API %s transport error: %s", method, exc)
            raise RemoteAPIError(method, str(exc)) from exc

        if response.status_code >= 400:
            logger.error("Ringotel API %s returned HTTP %s", method, response.status_code)
            raise RemoteAPIError(method, response.text, response.status_code)

        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as exc:
            raise RemoteAPIError(method, response.text, response.status_code) from exc

        if isinstance(data, dict) and data.get("error"):
            logger.error("Ringotel API %s returned error: %s", method, data["error"])
            raise RemoteAPIError(method, data["error"], response.status_code)
        return data

    # ── Организации ──────────────────────────────────────────────────────

    async def get_organizations(self) -> dict[str, Any]:
        return await self.call("getOrganizations")

    async def create_organization(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.call("createOrganization", params)

    async def update_organization(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.call("updateOrganization", params)

    async def delete_organization(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.call("deleteOrganization", params)

    # ── Подключения ──────────────────────────────────────────────────────

    async def get_branches(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.call("getBranches", params)

    async def create_branch(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.call("createBranch", params)

    async def update_branch(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.call("updateBranch", params)

    async def delete_branch(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.call("deleteBranch", params)

    # ── Пользователи ─────────────────────────────────────────────────────

    async def get_users(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.call("getUsers", params)

    async def create_users(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.call("createUsers", params)

    async def update_user(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.call("updateUser", params)

    async def delete_user(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.call("deleteUser", params)

    async def deactivate_user(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.call("deactivateUser", params)

    async def reset_user_password(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.call("resetUserPassword", params)

    # ── Интеграции и SMS-транки ──────────────────────────────────────────

    async def get_services(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.call("getServices", params)

    async def create_integration(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.call("createIntegration", params)

    async def delete_integration(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.call("deleteIntegration", params)

    async def get_sms_trunks(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.call("getSMSTrunks", params)

    async def create_sms_trunk(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.call("createSMSTrunk", params)

    async def update_sms_trunk(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.call("updateSMSTrunk", params)

    async def delete_sms_trunk(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.call("deleteSMSTrunk", params)


def result_items(response: dict[str, Any]) -> list[dict[str, Any]]:
    """Список из ``result`` ответа; пустой, если Ringotel ничего не вернул."""
    items = response.get("result") if response else None
    if not items:
        return []
    if isinstance(items, dict):
        return [items]
    return list(items)
