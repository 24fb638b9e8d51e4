"""
Tests for Ringotel user operations against the in-memory extension directory.

Run with: pytest tests/test_user_service.py -v
"""

from uuid import UUID

import pytest

from softphone.models.requests import (
    ExtensionNameUpdate,
    UserExtensionRef,
    UserList,
    UsersCreate,
    UserUpdate,
)
from softphone.services import user_service

EXT_101_UUID = UUID("0f0d1f44-3c2b-4d8e-9a51-1b4f6c7e8a01")

ORGS = {"result": [{"id": "200", "name": "Acme", "domain": "acme-ringotel"}]}


@pytest.fixture
def ext_101(extension_store, tenant):
    return extension_store.add_extension(
        tenant.domain_uuid, "101", "Alice Smith", "s3cret", "alice@example.com",
        extension_uuid=EXT_101_UUID,
    )


class TestGetUsers:

    @pytest.mark.asyncio
    async def test_extension_exists_flag(self, tenant, api, settings, ext_101):
        api.get_users.return_value = {"result": [
            {"id": "u1", "extension": "101"},
            {"id": "u2", "extension": " 1-0-2 "},
        ]}
        result = await user_service.get_users(tenant, UserList(orgid="200"), api, settings)
        flags = {u["id"]: u["extension_exists"] for u in result["result"]}
        assert flags == {"u1": True, "u2": False}
        api.get_organizations.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_digits_are_compared(self, tenant, api, settings, ext_101):
        api.get_users.return_value = {"result": [{"id": "u1", "extension": "(101)"}]}
        result = await user_service.get_users(tenant, UserList(orgid="200"), api, settings)
        assert result["result"][0]["extension_exists"] is True

    @pytest.mark.asyncio
    async def test_resolves_organization_when_not_given(self, tenant, api, settings):
        api.get_organizations.return_value = ORGS
        api.get_users.return_value = {"result": []}
        await user_service.get_users(tenant, UserList(), api, settings)
        api.get_users.assert_awaited_once_with({"orgid": "200"})

    @pytest.mark.asyncio
    async def test_unprovisioned_tenant(self, tenant, api, settings):
        api.get_organizations.return_value = {"result": []}
        assert await user_service.get_users(tenant, UserList(), api, settings) == {}
        api.get_users.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_users_state(self, tenant, api, settings):
        api.get_users.return_value = {"result": [
            {"id": "u1", "state": 1, "name": "Alice"},
        ]}
        result = await user_service.users_state(
            tenant, UserList(orgid="200", branchid="br-1"), api, settings,
        )
        assert result == {"result": [{"id": "u1", "state": 1}]}
        api.get_users.assert_awaited_once_with({"orgid": "200", "branchid": "br-1"})

    @pytest.mark.asyncio
    async def test_ringotel_extensions(self, tenant, api, settings):
        api.get_organizations.return_value = ORGS
        api.get_users.return_value = {"result": [
            {"id": "u1", "extension": "101", "status": 1},
            {"id": "u2", "extension": "102", "status": 0},
        ]}
        result = await user_service.get_ringotel_extensions(tenant, api, settings)
        assert result == [
            {"extension": "101", "status": 1},
            {"extension": "102", "status": 0},
        ]


class TestCreateUsers:

    @pytest.mark.asyncio
    async def test_creates_selected_extensions(self, tenant, api, settings, ext_101):
        api.create_users.return_value = {"result": [{"id": "u1"}]}
        request = UsersCreate(
            orgid="200", branchid="br-1", branchname="acme", orgdomain="acme-ringotel",
            preusers=[{"extension_uuid": str(EXT_101_UUID), "create": True, "active": True}],
        )
        result = await user_service.create_users(tenant, request, api, settings)
        assert result == {"result": [{"id": "u1"}]}
        payload = api.create_users.await_args.args[0]
        assert [u["extension"] for u in payload["users"]] == ["101"]
        assert payload["users"][0]["status"] == 1

    @pytest.mark.asyncio
    async def test_nothing_selected(self, tenant, api, settings, ext_101):
        request = UsersCreate(
            orgid="200", branchid="br-1", branchname="acme", orgdomain="acme-ringotel",
            preusers=[{"extension_uuid": str(EXT_101_UUID), "create": False}],
        )
        assert await user_service.create_users(tenant, request, api, settings) == {}
        api.create_users.assert_not_awaited()


class TestMissingExtension:
    """Без локального extension в Ringotel ничего не отправляется."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", ["resync_names", "resync_password", "activate_user"])
    async def test_returns_empty(self, tenant, api, settings, operation):
        handler = getattr(user_service, operation)
        request = UserExtensionRef(orgid="200", id="u9", extension="999")
        assert await handler(tenant, request, api, settings) == {}
        api.update_user.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_user(self, tenant, api, settings):
        request = UserUpdate(orgid="200", id="u9", extension="999", name="Ghost")
        assert await user_service.update_user(tenant, request, api, settings) == {}
        api.update_user.assert_not_awaited()


class TestResync:

    @pytest.mark.asyncio
    async def test_resync_names(self, tenant, api, settings, ext_101):
        api.update_user.return_value = {"result": {"id": "u1"}}
        request = UserExtensionRef(orgid="200", id="u1", extension="101")
        await user_service.resync_names(tenant, request, api, settings)
        api.update_user.assert_awaited_once_with({"orgid": "200", "id": "u1", "name": "Alice Smith"})

    @pytest.mark.asyncio
    async def test_resync_password(self, tenant, api, settings, ext_101):
        request = UserExtensionRef(orgid="200", id="u1", extension="101")
        await user_service.resync_password(tenant, request, api, settings)
        api.update_user.assert_awaited_once_with({"orgid": "200", "id": "u1", "password": "s3cret"})

    @pytest.mark.asyncio
    async def test_activate_user(self, tenant, api, settings, ext_101):
        request = UserExtensionRef(orgid="200", id="u1", extension="101")
        await user_service.activate_user(tenant, request, api, settings)
        payload = api.update_user.await_args.args[0]
        assert payload["status"] == 1
        assert payload["email"] == "alice@example.com"
        assert payload["username"] == "101"

    @pytest.mark.asyncio
    async def test_update_user_sparse(self, tenant, api, settings, ext_101):
        request = UserUpdate(orgid="200", id="u1", extension="101", email="", password="")
        await user_service.update_user(tenant, request, api, settings)
        api.update_user.assert_awaited_once_with({
            "orgid": "200", "id": "u1", "extension": "101", "status": 0,
        })


class TestUpdateExtensionName:

    @pytest.mark.asyncio
    async def test_renames_matching_user(self, tenant, api, settings, ext_101):
        api.get_organizations.return_value = ORGS
        api.get_users.return_value = {"result": [
            {"id": "u1", "extension": "101", "status": 1},
            {"id": "u2", "extension": "102", "status": 0},
        ]}
        await user_service.update_extension_name(
            tenant, ExtensionNameUpdate(extension="101", name="Alice Jones"), api, settings,
        )
        api.update_user.assert_awaited_once_with({
            "orgid": "200", "id": "u1", "name": "Alice Jones", "extension": "101", "status": 1,
        })

    @pytest.mark.asyncio
    async def test_no_matching_user(self, tenant, api, settings, ext_101):
        api.get_organizations.return_value = ORGS
        api.get_users.return_value = {"result": [{"id": "u2", "extension": "102"}]}
        result = await user_service.update_extension_name(
            tenant, ExtensionNameUpdate(extension="101", name="Alice Jones"), api, settings,
        )
        assert result == {}
        api.update_user.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_name_is_ignored(self, tenant, api, settings):
        result = await user_service.update_extension_name(
            tenant, ExtensionNameUpdate(extension="101"), api, settings,
        )
        assert result == {}
        api.get_organizations.assert_not_awaited()
