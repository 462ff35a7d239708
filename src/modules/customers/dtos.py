"""Customer DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (views) and the Service
layer.  DTOs are immutable (``frozen=True``).

- ``CreateCustomerDTO``: input for customer creation (address nested).
- ``UpdateCustomerDTO``: partial input; empty values mean "not provided".
- ``CustomerDTO``: output, with the referenced address embedded.

A customer is identified by its email address.
"""

from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from pydantic.networks import validate_email

from modules.addresses.dtos import AddressDTO, CreateAddressDTO, UpdateAddressDTO

_CONFIG = ConfigDict(frozen=True, coerce_numbers_to_str=True, str_strip_whitespace=True)


def canonical_email(value: str) -> str:
    """Return the form ``EmailStr`` stores (domain lower-cased).

    Values that are not e-mail addresses are returned unchanged so they
    simply miss on lookup.
    """
    try:
        return validate_email(value)[1]
    except ValueError:
        return value


def _digits_only(v: Optional[str]) -> Optional[str]:
    """Strip non-digit characters (accept formatted or raw phone numbers)."""
    if not isinstance(v, str):
        return v
    return re.sub(r"\D", "", v)


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateCustomerDTO(BaseModel):
    """Immutable DTO for customer creation requests.

    Validates:
    - ``email`` is a well-formed address (Pydantic ``EmailStr``);
    - ``first_name`` and ``last_name`` are not blank;
    - ``phone_number`` is sanitised to digits.
    """

    model_config = _CONFIG

    email: EmailStr
    first_name: str
    last_name: str
    phone_number: str = ""
    address: CreateAddressDTO

    @field_validator("first_name", "last_name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("phone_number", mode="before")
    @classmethod
    def sanitize_phone(cls, v: str) -> str:
        return _digits_only(v)


class UpdateCustomerDTO(BaseModel):
    """Immutable DTO for customer update requests.

    All fields are optional; only non-empty fields are updated.  The
    customer's email is its key and cannot be changed.
    """

    model_config = _CONFIG

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[UpdateAddressDTO] = None

    @field_validator("phone_number", mode="before")
    @classmethod
    def sanitize_phone(cls, v: Optional[str]) -> Optional[str]:
        return _digits_only(v)


# ---------------------------------------------------------------------------
# Output DTO
# ---------------------------------------------------------------------------


class CustomerDTO(BaseModel):
    model_config = _CONFIG

    email: str
    first_name: str = ""
    last_name: str = ""
    phone_number: str = ""
    address: Optional[AddressDTO] = None
    deleted: bool = False
