"""
softphone.models — Модели данных домена.

Реэкспорт основных классов для удобства:
    from softphone.models import LocalTenant, RemoteOrganization
"""

from softphone.models.enums import ServiceState, UserStatus  # noqa: F401
from softphone.models.tenant import LocalExtension, LocalTenant, digits_only  # noqa: F401
from softphone.models.ringotel import (  # noqa: F401
    CallPark,
    ParkSlot,
    ProvisioningProfile,
    RemoteBranch,
    RemoteOrganization,
    RemoteService,
    RemoteUser,
    SmsTrunk,
)
