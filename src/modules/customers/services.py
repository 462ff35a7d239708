"""Customer service layer (Use Cases).

Orchestrates business logic for the Customer aggregate.  Customer rows
live in the customers table and point at their address row through
``address_ref``; address persistence is delegated to ``AddressService``.

Rules enforced here:
- a customer is keyed by email; an email is never reused, even after the
  customer was deleted;
- the customer's address is validated before anything is written;
- deleting a customer soft-deletes its address too.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from modules.core.exceptions import (
    DataObjectError,
    InvalidInput,
    ObjectExists,
    ObjectNotFound,
)
from modules.customers.dtos import (
    CreateCustomerDTO,
    CustomerDTO,
    UpdateCustomerDTO,
    canonical_email,
)

if TYPE_CHECKING:
    from modules.addresses.dtos import AddressDTO
    from modules.addresses.services import AddressService
    from modules.core.dao import Dao

logger = structlog.get_logger(__name__)

CUSTOMER_FIELDS = ("first_name", "last_name", "phone_number")


def create_customer_key(id: str) -> Dict[str, str]:
    return {"id": canonical_email(id)}


def map_customer_to_record(customer: Any) -> Dict[str, Any]:
    """Build the stored shape of a customer DTO, skipping empty fields."""
    record: Dict[str, Any] = {}
    email = getattr(customer, "email", None)
    if email:
        record["id"] = email
    for field in CUSTOMER_FIELDS:
        value = getattr(customer, field, None)
        if value:
            record[field] = value
    return record


class CustomerService:
    """Application service for Customer use-cases.

    Receives the customers ``Dao`` and an ``AddressService`` via
    constructor injection.
    """

    def __init__(self, dao: Dao, address_service: AddressService) -> None:
        self._dao = dao
        self._addresses = address_service

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def save(self, input: Union[CreateCustomerDTO, Mapping[str, Any]]) -> CustomerDTO:
        """Create a customer and its address.

        Raises:
            InvalidInput: malformed customer fields.
            AddressNotSpecific, AddressInvalid: rejected address.
            ObjectExists: the email is already registered.
        """
        dto = self._parse(CreateCustomerDTO, input)
        log = logger.bind(customer_id=dto.email)
        key = create_customer_key(dto.email)

        address = self._addresses.create(dto.address)
        # Checked up front so a duplicate never leaves an orphan address.
        if self._dao.exists(key):
            log.warning("customer.duplicate_email")
            raise ObjectExists(f"Customer {dto.email} already registered.")

        saved_address = self._addresses.save(address)
        record = map_customer_to_record(dto)
        record["address_ref"] = saved_address.id
        record["deleted"] = False

        self._dao.insert(key, record)
        log.info("customer.created", address_id=saved_address.id)
        return self._to_dto(record, saved_address)

    def update(self, id: str, input: Union[UpdateCustomerDTO, Mapping[str, Any]]) -> CustomerDTO:
        """Merge the supplied customer fields, and address fields if any.

        Raises:
            InvalidInput: ``id`` is empty or the input is malformed.
            AddressInvalid: a supplied state or zip code is malformed.
            ObjectNotFound: no live customer with this id, or address
                changes target an address that was deleted.
        """
        if not id:
            raise InvalidInput("id")
        dto = self._parse(UpdateCustomerDTO, input)
        key = create_customer_key(id)
        log = logger.bind(customer_id=id)

        address_changes = dto.address if dto.address and dto.address.has_changes() else None
        if address_changes is not None:
            self._addresses.validate_changes(address_changes)
            # Both rows must be live before either is written.
            current = self._dao.fetch_by_key(key)
            if not current:
                raise ObjectNotFound(f"Customer {id} not found.")
            current_ref = current.get("address_ref")
            if current_ref and self._addresses.fetch(current_ref) is None:
                log.warning("customer.address_missing", address_id=current_ref)
                raise ObjectNotFound(f"Address {current_ref} of customer {id} not found.")

        record = self._dao.merge_update(key, map_customer_to_record(dto))

        address_ref = record.get("address_ref")
        if address_changes is not None and address_ref:
            address = self._addresses.update(address_ref, address_changes)
        else:
            address = self._fetch_address(address_ref)

        log.info("customer.updated", address_updated=address_changes is not None)
        return self._to_dto(record, address)

    def delete(self, id: str) -> CustomerDTO:
        """Soft-delete a customer and its address.

        Raises:
            InvalidInput: ``id`` is empty.
            ObjectNotFound: nothing is stored under this id.
        """
        if not id:
            raise InvalidInput("id")
        record = self._dao.soft_delete(create_customer_key(id))

        address = None
        address_ref = record.get("address_ref")
        if address_ref:
            try:
                address = self._addresses.delete(address_ref)
            except ObjectNotFound:
                logger.warning("customer.address_missing", customer_id=id, address_id=address_ref)

        logger.info("customer.soft_deleted", customer_id=id)
        return self._to_dto(record, address)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def fetch(self, id: Optional[str] = None) -> Union[CustomerDTO, List[CustomerDTO], None]:
        """Return one live customer (``None`` if absent) or, without id, all of them."""
        if not id:
            return [
                self._to_dto(record, self._fetch_address(record.get("address_ref")))
                for record in self._dao.fetch_all()
            ]

        record = self._dao.fetch_by_key(create_customer_key(id))
        if not record:
            return None
        logger.info("customer.retrieved", customer_id=id)
        return self._to_dto(record, self._fetch_address(record.get("address_ref")))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _parse(dto_class, input):
        if isinstance(input, dto_class):
            return input
        try:
            return dto_class.model_validate(input)
        except PydanticValidationError as exc:
            raise InvalidInput("customer", str(exc)) from exc

    def _fetch_address(self, address_ref: Optional[str]) -> Optional[AddressDTO]:
        if not address_ref:
            return None
        return self._addresses.fetch(address_ref)

    @staticmethod
    def _to_dto(record: Mapping[str, Any], address: Optional[AddressDTO]) -> CustomerDTO:
        try:
            return CustomerDTO(
                email=record["id"],
                first_name=record.get("first_name", ""),
                last_name=record.get("last_name", ""),
                phone_number=record.get("phone_number", ""),
                address=address,
                deleted=record.get("deleted", False),
            )
        except PydanticValidationError as exc:
            logger.error("customer.unreadable_record", customer_id=record.get("id"))
            raise DataObjectError(f"Stored customer {record.get('id')} is malformed.") from exc
