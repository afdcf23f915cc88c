"""Tagged credential payloads for manufacturer and platform connectors.

Each variant carries a literal ``kind`` so a payload sent for the wrong
connector fails validation at the boundary instead of deep inside a call.
"""

from typing import Literal, Optional

from pydantic import BaseModel


# --- Manufacturers ---

class DellCredentials(BaseModel):
    kind: Literal["dell"] = "dell"
    client_id: str
    client_secret: str


class HPCredentials(BaseModel):
    kind: Literal["hp"] = "hp"
    api_key: str


class LenovoCredentials(BaseModel):
    kind: Literal["lenovo"] = "lenovo"
    api_key: str


class ManufacturerCredentials(BaseModel):
    """Credentials for every manufacturer API the caller has configured."""

    dell: Optional[DellCredentials] = None
    hp: Optional[HPCredentials] = None
    lenovo: Optional[LenovoCredentials] = None

    def for_manufacturer(self, manufacturer: str) -> Optional[BaseModel]:
        if manufacturer not in type(self).model_fields:
            return None
        return getattr(self, manufacturer)


# --- Platforms ---

class DattoCredentials(BaseModel):
    kind: Literal["datto_rmm"] = "datto_rmm"
    url: str
    api_key: str
    secret_key: str


class NCentralCredentials(BaseModel):
    kind: Literal["ncentral"] = "ncentral"
    server_url: str
    username: str
    password: str


class HaloPSACredentials(BaseModel):
    kind: Literal["halopsa"] = "halopsa"
    url: str
    client_id: str
    client_secret: str


class PlatformCredentials(BaseModel):
    """Credentials for every source platform the caller has configured."""

    datto_rmm: Optional[DattoCredentials] = None
    ncentral: Optional[NCentralCredentials] = None
    halopsa: Optional[HaloPSACredentials] = None

    def for_platform(self, platform: str) -> Optional[BaseModel]:
        if platform not in type(self).model_fields:
            return None
        return getattr(self, platform)
