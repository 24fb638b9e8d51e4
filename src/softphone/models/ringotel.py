"""
softphone/models/ringotel.py — Объекты Ringotel API.

Organization → Branch (SIP-подключение) → User; SMS-транки и сервисы
(интеграции) привязаны к организации. Все модели принимают лишние поля
ответа (RemoteBase).
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_serializer

from softphone.models.common import RemoteBase
from softphone.models.enums import UserStatus
from softphone.models.tenant import digits_only

PARK_FEATURE_CODE = "park+*"


class ParkSlot(RemoteBase):
    """Слот парковки: номер и короткая подпись."""
    alias: str
    slot: str


class CallPark(RemoteBase):
    park: str = PARK_FEATURE_CODE
    retrieve: str = PARK_FEATURE_CODE
    subscribe: str = PARK_FEATURE_CODE
    slots: list[ParkSlot] = Field(default_factory=list)


class ProvisioningProfile(RemoteBase):
    """
    Блок ``provision`` подключения.

    ``maxregs`` обязателен: без него updateBranch Ringotel
    переписывает остальные поля произвольно.
    """
    maxregs: int = Field(..., ge=1)
    multitenant: bool = False
    norec: bool = False
    nostates: bool = False
    nochats: bool = False
    novideo: bool = False
    noptions: bool = True
    nologae: bool = False
    beta_updates: bool = False
    sms: int = 3
    paging: int = 0
    private: bool = False
    sms2email: bool = True
    nologmc: bool = False
    application: str = ""
    popup: int = 0
    calldelay: int = 10
    pcdelay: bool = False
    dnd: dict[str, str] = Field(default_factory=lambda: {"on": "", "off": ""})
    vmail: dict[str, str] = Field(
        default_factory=lambda: {
            "on": "",
            "off": "",
            "ext": "*97",
            "spref": "*97",
            "mess": "You have a new message",
            "name": "Voicemail",
        }
    )
    forwarding: dict[str, str] = Field(
        default_factory=lambda: {
            "cfon": "", "cfoff": "",
            "cfuon": "", "cfuoff": "",
            "cfbon": "", "cfboff": "",
        }
    )
    callwaiting: dict[str, str] = Field(default_factory=lambda: {"on": "", "off": ""})
    callpark: CallPark = Field(default_factory=CallPark)
    features: str = "pbx"
    blfs: list[Any] = Field(default_factory=list)
    speeddial: list[Any] = Field(default_factory=list)
    custompages: list[Any] = Field(default_factory=list)
    fallback: dict[str, str] = Field(default_factory=lambda: {"type": "", "prefix": ""})


class RemoteOrganization(RemoteBase):
    id: str
    name: str = ""
    domain: str = ""
    region: str = ""


class RemoteBranch(RemoteBase):
    id: str
    orgid: str = ""
    name: str = ""
    address: str = ""
    protocol: str = ""
    provision: dict[str, Any] = Field(default_factory=dict)

    @property
    def maxregs(self) -> int | None:
        """``maxregs`` из профиля; пустое или нечисловое значение — None."""
        value = self.provision.get("maxregs")
        try:
            maxregs = int(str(value).strip())
        except (TypeError, ValueError):
            return None
        return maxregs if maxregs >= 1 else None


class RemoteUser(RemoteBase):
    id: str
    orgid: str = ""
    branchid: str | None = None
    name: str = ""
    extension: str = ""
    username: str = ""
    authname: str = ""
    password: str | None = None
    email: str | None = None
    mobile: str | None = None
    status: int = int(UserStatus.INACTIVE)
    state: Any = None
    extension_exists: bool | None = None

    @property
    def digits(self) -> str:
        return digits_only(self.extension)


class SmsTrunk(RemoteBase):
    id: str | None = None
    orgid: str = ""
    name: str = ""
    number: str = ""
    users: set[str] = Field(default_factory=set)

    @field_serializer("users")
    def _serialize_users(self, users: set[str]) -> list[str]:
        return sorted(users)


class RemoteService(RemoteBase):
    """Элемент списка getServices (интеграция организации)."""
    id: str
    state: int = 0
