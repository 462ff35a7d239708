"""Address service layer (Use Cases).

Validates address input, maps domain field names to the attribute names
stored in the addresses table, and delegates persistence to the injected
``Dao``.

Address rules enforced here:
- an address needs a street and a building number, plus either a zip
  code or a city and state, to be specific enough to locate;
- ``state`` is a two-letter code, ``zip_code`` is ``12345`` or
  ``12345-6789``.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union

import structlog
import uuid6
from pydantic import ValidationError as PydanticValidationError

from modules.addresses.dtos import AddressDTO, CreateAddressDTO, UpdateAddressDTO
from modules.core.exceptions import (
    AddressInvalid,
    AddressNotSpecific,
    DataObjectError,
    InvalidInput,
)

if TYPE_CHECKING:
    from modules.core.dao import Dao

logger = structlog.get_logger(__name__)

STATE_PATTERN = re.compile(r"^[A-Z]{2}$")
ZIP_CODE_PATTERN = re.compile(r"^\d{5}(-\d{4})?$")

# Domain field name -> stored attribute name.
FIELD_TO_ATTRIBUTE = {
    "id": "id",
    "city": "residential_city",
    "state": "residential_state",
    "apt": "apt",
    "number": "building",
    "street": "street",
    "zip_code": "zip_code",
}

AddressInput = Union[AddressDTO, CreateAddressDTO, Mapping[str, Any]]


def create_address_key(id: str) -> Dict[str, str]:
    return {"id": id}


def map_address_to_record(address: Any) -> Dict[str, Any]:
    """Build the stored shape of ``address``, skipping empty fields.

    ``deleted`` is copied whenever the source carries a non-``None`` value.
    """
    record: Dict[str, Any] = {}
    for field, attribute in FIELD_TO_ATTRIBUTE.items():
        value = getattr(address, field, None)
        if value:
            record[attribute] = value
    deleted = getattr(address, "deleted", None)
    if deleted is not None:
        record["deleted"] = deleted
    return record


def map_record_to_address(record: Mapping[str, Any]) -> AddressDTO:
    """Build an ``AddressDTO`` from a stored record.

    Raises:
        DataObjectError: the record cannot be read back as an address.
    """
    attributes = {
        field: record[attribute]
        for field, attribute in FIELD_TO_ATTRIBUTE.items()
        if record.get(attribute) is not None
    }
    attributes["deleted"] = record.get("deleted", False)
    try:
        return AddressDTO(**attributes)
    except PydanticValidationError as exc:
        logger.error("address.unreadable_record", address_id=record.get("id"))
        raise DataObjectError(f"Stored address {record.get('id')} is malformed.") from exc


def _check_format(state: Optional[str], zip_code: Optional[str]) -> None:
    if state and not STATE_PATTERN.match(state):
        raise AddressInvalid(f"Invalid state '{state}'.")
    if zip_code and not ZIP_CODE_PATTERN.match(zip_code):
        raise AddressInvalid(f"Invalid zip code '{zip_code}'.")


class AddressService:
    """Application service for Address use-cases.

    Receives the addresses ``Dao`` via constructor injection.
    """

    def __init__(self, dao: Dao) -> None:
        self._dao = dao

    # ------------------------------------------------------------------
    # Building / validation
    # ------------------------------------------------------------------

    def create(self, input: AddressInput) -> Union[AddressDTO, CreateAddressDTO]:
        """Build and validate an address without persisting it.

        Raises:
            InvalidInput: the input is not an address-shaped mapping.
            AddressNotSpecific: street/number or locality is missing.
            AddressInvalid: state or zip code is malformed.
        """
        if isinstance(input, (AddressDTO, CreateAddressDTO)):
            address = input
        else:
            try:
                address = CreateAddressDTO.model_validate(input)
            except PydanticValidationError as exc:
                raise InvalidInput("address", str(exc)) from exc

        if not (address.street and address.number):
            raise AddressNotSpecific("Street and building number are required.")
        if not (address.zip_code or (address.city and address.state)):
            raise AddressNotSpecific("A zip code or a city and state are required.")
        _check_format(address.state, address.zip_code)
        return address

    def validate_changes(self, changes: UpdateAddressDTO) -> None:
        """Check the format of the fields a partial update supplies."""
        _check_format(changes.state, changes.zip_code)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def save(self, input: AddressInput) -> AddressDTO:
        """Validate and persist a new address, generating its id if needed.

        Raises:
            ObjectExists: an address (even a deleted one) already has this id.
        """
        address = self.create(input)
        address_id = address.id or str(uuid6.uuid7())
        record = map_address_to_record(address)
        record["id"] = address_id
        record["deleted"] = False

        self._dao.insert(create_address_key(address_id), record)
        logger.info("address.saved", address_id=address_id)
        return map_record_to_address(record)

    def update(self, id: str, input: Union[UpdateAddressDTO, Mapping[str, Any]]) -> AddressDTO:
        """Merge the supplied fields into the stored address.

        Raises:
            InvalidInput: ``id`` is empty or the input is malformed.
            AddressInvalid: a supplied state or zip code is malformed.
            ObjectNotFound: no live address with this id.
        """
        if not id:
            raise InvalidInput("id")
        if isinstance(input, UpdateAddressDTO):
            changes = input
        else:
            try:
                changes = UpdateAddressDTO.model_validate(input)
            except PydanticValidationError as exc:
                raise InvalidInput("address", str(exc)) from exc
        self.validate_changes(changes)

        updated = self._dao.merge_update(create_address_key(id), map_address_to_record(changes))
        logger.info("address.updated", address_id=id)
        return map_record_to_address(updated)

    def delete(self, id: str) -> AddressDTO:
        """Soft-delete an address.

        Raises:
            InvalidInput: ``id`` is empty.
            ObjectNotFound: nothing is stored under this id.
        """
        if not id:
            raise InvalidInput("id")
        deleted = self._dao.soft_delete(create_address_key(id))
        logger.info("address.soft_deleted", address_id=id)
        return map_record_to_address(deleted)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def fetch(self, id: Optional[str] = None) -> Union[AddressDTO, List[AddressDTO], None]:
        """Return one live address (``None`` if absent) or, without id, all of them."""
        if not id:
            return [map_record_to_address(record) for record in self._dao.fetch_all()]

        record = self._dao.fetch_by_key(create_address_key(id))
        if not record:
            return None
        return map_record_to_address(record)
