"""
Test configuration for pytest
"""

import os
from unittest.mock import AsyncMock
from uuid import UUID

import pytest

# Test environment variables (до импорта softphone.*)
os.environ["APP_ENV"] = "test"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"
os.environ["RINGOTEL_TOKEN"] = "test-ringotel-token"
os.environ["RINGOTEL_API"] = "https://ringotel.test/api"

from softphone import memory_store  # noqa: E402
from softphone.adapters.ringotel_client import RingotelClient  # noqa: E402
from softphone.config import SoftphoneSettings  # noqa: E402
from softphone.models.tenant import LocalTenant  # noqa: E402

DOMAIN_UUID = UUID("5b8a0f0e-6f43-4a43-9b36-2f1a4b0c7d11")


@pytest.fixture(autouse=True)
def extension_store():
    """In-memory каталог extensions, чистый для каждого теста."""
    memory_store.activate_memory_store()
    memory_store.clear()
    yield memory_store
    memory_store.clear()


@pytest.fixture
def tenant() -> LocalTenant:
    return LocalTenant(domain_name="acme.example.com", domain_uuid=DOMAIN_UUID)


@pytest.fixture
def settings() -> SoftphoneSettings:
    return SoftphoneSettings(
        _env_file=None,
        domain_name_postfix="-ringotel",
        max_registration=2,
        default_connection_protocol="sip-tcp",
        organization_default_emailcc="noc@example.com",
        ringotel_organization_region="us-east",
        integration_providers=["Bandwidth"],
        integration_username="bw-user",
        integration_password="bw-pass",
        integration_account_id="9900001",
        integration_application_id="app-1",
    )


@pytest.fixture
def api() -> AsyncMock:
    """Ringotel API-клиент без сети."""
    return AsyncMock(spec=RingotelClient)
