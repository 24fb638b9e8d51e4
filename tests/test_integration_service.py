"""
Tests for SMS integrations and SMS trunks.

Run with: pytest tests/test_integration_service.py -v
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from softphone.models.requests import IntegrationRef, TrunkCreate, TrunkList, TrunkRef, TrunkUpdate
from softphone.models.ringotel import RemoteService
from softphone.services import integration_service


class TestActiveIntegrations:

    def test_filters_by_state_and_provider(self):
        services = [
            RemoteService(id="Bandwidth", state=1),
            RemoteService(id="Bandwidth", state=0),
            RemoteService(id="Telnyx", state=1),
        ]
        active = integration_service.active_integrations(services, ["Bandwidth"])
        assert [(s.id, s.state) for s in active] == [("Bandwidth", 1)]

    @pytest.mark.asyncio
    async def test_get_integration(self, tenant, api, settings):
        api.get_services.return_value = {"result": [
            {"id": "Bandwidth", "state": 1, "name": "Bandwidth SMS"},
            {"id": "Zapier", "state": 1},
        ]}
        result = await integration_service.get_integration(tenant, TrunkList(orgid="200"), api, settings)
        assert result == {"result": [{"id": "Bandwidth", "state": 1, "name": "Bandwidth SMS"}]}
        api.get_services.assert_awaited_once_with({"orgid": "200"})

    @pytest.mark.asyncio
    async def test_nothing_enabled(self, tenant, api, settings):
        api.get_services.return_value = {}
        result = await integration_service.get_integration(tenant, TrunkList(orgid="200"), api, settings)
        assert result == {"result": []}


class TestIntegrationToggle:

    @pytest.mark.asyncio
    async def test_create_uses_configured_credentials(self, tenant, api, settings):
        await integration_service.create_integration(
            tenant, IntegrationRef(profileid="200"), api, settings,
        )
        api.create_integration.assert_awaited_once_with({
            "profileid": "200",
            "Username": "bw-user",
            "Password": "bw-pass",
            "Account_ID": "9900001",
            "Application_ID": "app-1",
        })

    @pytest.mark.asyncio
    async def test_delete_accepts_orgid_alias(self, tenant, api, settings):
        await integration_service.delete_integration(
            tenant, IntegrationRef.model_validate({"orgid": "200"}), api, settings,
        )
        assert api.delete_integration.await_args.args[0]["profileid"] == "200"


class TestSmsTrunks:

    @pytest.mark.asyncio
    async def test_create_defaults_name_to_number(self, tenant, api, settings):
        request = TrunkCreate(orgid="200", number="+15551230000", users=["u2", "u1", "u2"])
        await integration_service.create_sms_trunk(tenant, request, api, settings)
        api.create_sms_trunk.assert_awaited_once_with({
            "orgid": "200",
            "name": "+15551230000",
            "number": "+15551230000",
            "users": ["u1", "u2"],
        })

    def test_create_requires_users(self):
        with pytest.raises(PydanticValidationError):
            TrunkCreate(orgid="200", number="+15551230000", users=[])

    @pytest.mark.asyncio
    async def test_update_replaces_all_fields(self, tenant, api, settings):
        request = TrunkUpdate(orgid="200", id="t1", name="Sales", number="+15551230000", users=["u3"])
        await integration_service.update_sms_trunk(tenant, request, api, settings)
        api.update_sms_trunk.assert_awaited_once_with({
            "orgid": "200", "id": "t1", "name": "Sales", "number": "+15551230000", "users": ["u3"],
        })

    @pytest.mark.asyncio
    async def test_get_and_delete(self, tenant, api, settings):
        await integration_service.get_sms_trunk(tenant, TrunkList(orgid="200"), api, settings)
        await integration_service.delete_sms_trunk(tenant, TrunkRef(orgid="200", id="t1"), api, settings)
        api.get_sms_trunks.assert_awaited_once_with({"orgid": "200"})
        api.delete_sms_trunk.assert_awaited_once_with({"orgid": "200", "id": "t1"})
