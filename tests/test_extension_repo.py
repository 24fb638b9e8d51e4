"""
Tests for the FusionPBX extension directory (asyncpg connection mocked).

Run with: pytest tests/test_extension_repo.py -v
"""

import importlib
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from softphone.db.repositories import extension_repo
from softphone.models.requests import UserList
from softphone.models.tenant import LocalExtension
from softphone.services import user_service


def null_row(extension: str = "101") -> dict:
    """Строка v_extensions с пустыми (NULL) именем, паролем и e-mail."""
    return {
        "extension_uuid": uuid4(),
        "extension": extension,
        "effective_caller_id_name": None,
        "password": None,
        "email": None,
    }


@pytest.fixture
def sql_repo(monkeypatch):
    """SQL-реализация extension_repo поверх фиктивного соединения."""
    repo = importlib.reload(extension_repo)
    conn = MagicMock()
    conn.fetch = AsyncMock(return_value=[null_row("101"), null_row("102")])
    conn.fetchrow = AsyncMock(return_value=null_row("101"))

    @asynccontextmanager
    async def fake_connection():
        yield conn

    monkeypatch.setattr(repo, "get_connection", fake_connection)
    return repo, conn


class TestNullColumns:

    def test_model_accepts_nulls(self):
        ext = LocalExtension(**null_row())
        assert ext.effective_caller_id_name == ""
        assert ext.password == ""
        assert ext.email is None

    def test_row_to_extension(self):
        ext = extension_repo.row_to_extension(null_row("2001"))
        assert ext.extension == "2001"
        assert ext.effective_caller_id_name == ""

    @pytest.mark.asyncio
    async def test_list_extensions(self, sql_repo, tenant):
        repo, conn = sql_repo
        extensions = await repo.list_extensions(tenant.domain_uuid)
        assert [e.extension for e in extensions] == ["101", "102"]
        assert all(e.password == "" for e in extensions)
        sql = conn.fetch.await_args.args[0]
        assert "COALESCE(e.effective_caller_id_name, '')" in sql
        assert "COALESCE(e.password, '')" in sql

    @pytest.mark.asyncio
    async def test_get_extension(self, sql_repo, tenant):
        repo, conn = sql_repo
        ext = await repo.get_extension(tenant.domain_uuid, "101")
        assert ext is not None and ext.effective_caller_id_name == ""
        assert conn.fetchrow.await_args.args[1:] == (tenant.domain_uuid, "101")

    @pytest.mark.asyncio
    async def test_get_users_with_null_extension(self, tenant, api, settings, monkeypatch):
        monkeypatch.setattr(
            extension_repo, "list_extensions",
            AsyncMock(return_value=[extension_repo.row_to_extension(null_row("101"))]),
        )
        api.get_users.return_value = {"result": [{"id": "u1", "extension": "101"}]}
        result = await user_service.get_users(tenant, UserList(orgid="200"), api, settings)
        assert result["result"][0]["extension_exists"] is True
