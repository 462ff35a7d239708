"""Unit tests for Customer DTOs."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from modules.addresses.dtos import UpdateAddressDTO
from modules.customers.dtos import CreateCustomerDTO, CustomerDTO, UpdateCustomerDTO

pytestmark = pytest.mark.unit

ADDRESS = {"street": "Second Street", "number": 890, "city": "Las Vegas", "state": "nv"}


class TestCreateCustomerDTO:
    def test_valid(self):
        dto = CreateCustomerDTO(
            email="josruice@gmail.com",
            first_name="Pedro",
            last_name="Ruiz",
            phone_number="929-123-4567",
            address=ADDRESS,
        )
        assert dto.phone_number == "9291234567"
        assert dto.address.number == "890"
        assert dto.address.state == "NV"

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            CreateCustomerDTO(
                email="josruice", first_name="Pedro", last_name="Ruiz", address=ADDRESS
            )

    def test_frozen(self):
        dto = CreateCustomerDTO(
            email="josruice@gmail.com", first_name="Pedro", last_name="Ruiz", address=ADDRESS
        )
        with pytest.raises(ValidationError):
            dto.first_name = "Jose"


class TestUpdateCustomerDTO:
    def test_all_fields_optional(self):
        dto = UpdateCustomerDTO()
        assert dto.first_name is None
        assert dto.address is None

    def test_empty_address_has_no_changes(self):
        dto = UpdateCustomerDTO(address={"city": "", "zip_code": ""})
        assert dto.address.has_changes() is False

    def test_address_with_a_value_has_changes(self):
        assert UpdateAddressDTO(apt="4B").has_changes() is True


class TestCustomerDTO:
    def test_defaults(self):
        dto = CustomerDTO(email="josruice@gmail.com")
        assert dto.address is None
        assert dto.deleted is False
