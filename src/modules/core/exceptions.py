"""Domain exceptions shared by the data-access and service layers.

Raised by the ``Dao`` and the entity services.  The API layer never
catches these one by one: the DRF exception handler in
``modules.core.error_mapping`` classifies them into an HTTP status and a
user-facing message.
"""

from __future__ import annotations


class DaoException(Exception):
    """Base class for every failure the backend raises on purpose."""


class InvalidInput(DaoException):
    """The request carried a missing or malformed field."""

    def __init__(self, field: str = "", detail: str = "") -> None:
        self.field = field
        message = f"Invalid input for '{field}'" if field else "Invalid input"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ObjectNotFound(DaoException):
    """No live record exists for the requested key."""


class MethodNotAllowed(DaoException):
    """The operation is not supported on this resource."""


class DataObjectError(DaoException):
    """A stored record could not be mapped back to a domain object."""


class ObjectExists(DaoException):
    """A record already exists at the key (soft-deleted records included)."""


class AddressInvalid(DaoException):
    """An address field has a malformed value (state, zip code)."""


class AddressNotSpecific(DaoException):
    """An address lacks the fields needed to locate it (street, number)."""
