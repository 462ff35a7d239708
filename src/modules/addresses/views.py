"""Address API views.

Exposes the ``AddressService`` via HTTP using a DRF ViewSet.  Domain
exceptions are not caught here: they propagate to the project-wide
exception handler (``modules.core.error_mapping``), which turns them
into a status code and a user-facing message.
"""

from __future__ import annotations

from typing import Any, Mapping

from django.conf import settings
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.addresses.serializers import AddressSerializer
from modules.addresses.services import AddressService
from modules.core.dao import Dao
from modules.core.error_mapping import render_response
from modules.core.exceptions import InvalidInput, ObjectNotFound
from modules.core.store.factory import get_store_client


def address_payload(data: Any) -> Mapping[str, Any]:
    """Accept both ``{"address": {...}}`` and a flat address body."""
    if not isinstance(data, Mapping):
        raise InvalidInput("address", "expected a JSON object")
    nested = data.get("address")
    if isinstance(nested, Mapping):
        return nested
    return data


class AddressViewSet(GenericViewSet):
    """ViewSet for Address CRUD operations."""

    serializer_class = AddressSerializer
    lookup_value_regex = "[^/]+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = AddressService(
            dao=Dao(get_store_client(settings.ADDRESSES_TABLE))
        )

    def list(self, request: Request) -> Response:
        """GET /api/v1/addresses/"""
        addresses = self._service.fetch()
        return render_response(None, AddressSerializer(addresses, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/addresses/{pk}/"""
        address = self._service.fetch(pk)
        if address is None:
            raise ObjectNotFound(f"Address {pk} not found.")
        return render_response(None, AddressSerializer(address).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/addresses/"""
        address = self._service.save(address_payload(request.data))
        return render_response(
            None,
            AddressSerializer(address).data,
            success_status=status.HTTP_201_CREATED,
        )

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/addresses/{pk}/"""
        address = self._service.update(pk, address_payload(request.data))
        return render_response(None, AddressSerializer(address).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/addresses/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/addresses/{pk}/"""
        address = self._service.delete(pk)
        return render_response(None, AddressSerializer(address).data)
