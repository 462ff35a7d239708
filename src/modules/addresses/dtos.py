"""Address DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2, immutable
(``frozen=True``).  Numbers sent by clients (``"number": 22``) are
accepted and kept as strings.

- ``CreateAddressDTO``: input for address creation.
- ``UpdateAddressDTO``: partial input; only supplied fields are updated.
- ``AddressDTO``: the address as returned to callers.

Field-level address rules (specificity, state and zip code format) live
in the service so they raise the address-specific domain exceptions.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

_CONFIG = ConfigDict(frozen=True, coerce_numbers_to_str=True, str_strip_whitespace=True)


class CreateAddressDTO(BaseModel):
    model_config = _CONFIG

    id: Optional[str] = None
    city: str = ""
    state: str = ""
    apt: str = ""
    number: str = ""
    street: str = ""
    zip_code: str = ""

    @field_validator("state")
    @classmethod
    def upper_state(cls, v: str) -> str:
        return v.upper()


class UpdateAddressDTO(BaseModel):
    """All fields optional; ``None`` and ``""`` both mean "leave as is"."""

    model_config = _CONFIG

    city: Optional[str] = None
    state: Optional[str] = None
    apt: Optional[str] = None
    number: Optional[str] = None
    street: Optional[str] = None
    zip_code: Optional[str] = None

    @field_validator("state")
    @classmethod
    def upper_state(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else v

    def has_changes(self) -> bool:
        return any(self.model_dump().values())


class AddressDTO(BaseModel):
    model_config = _CONFIG

    id: str
    city: str = ""
    state: str = ""
    apt: str = ""
    number: str = ""
    street: str = ""
    zip_code: str = ""
    deleted: bool = False
