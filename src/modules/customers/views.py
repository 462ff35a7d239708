"""Customer API views.

Exposes the ``CustomerService`` via HTTP using a DRF ViewSet.  Domain
exceptions propagate to the project-wide exception handler
(``modules.core.error_mapping``); the view never catches them.
"""

from __future__ import annotations

from django.conf import settings
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.addresses.services import AddressService
from modules.core.dao import Dao
from modules.core.error_mapping import render_response
from modules.core.exceptions import InvalidInput, ObjectNotFound
from modules.core.store.factory import get_store_client
from modules.customers.dtos import canonical_email
from modules.customers.serializers import CustomerSerializer
from modules.customers.services import CustomerService


class CustomerViewSet(GenericViewSet):
    """ViewSet for Customer CRUD operations.

    Customers are addressed by email, so the lookup accepts dots.
    """

    serializer_class = CustomerSerializer
    lookup_value_regex = "[^/]+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CustomerService(
            dao=Dao(get_store_client(settings.CUSTOMERS_TABLE)),
            address_service=AddressService(
                dao=Dao(get_store_client(settings.ADDRESSES_TABLE))
            ),
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/customers/"""
        customers = self._service.fetch()
        return render_response(None, CustomerSerializer(customers, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/customers/{pk}/"""
        customer = self._service.fetch(pk)
        if customer is None:
            raise ObjectNotFound(f"Customer {pk} not found.")
        return render_response(None, CustomerSerializer(customer).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/customers/"""
        customer = self._service.save(self._payload(request))
        return render_response(
            None,
            CustomerSerializer(customer).data,
            success_status=status.HTTP_201_CREATED,
        )

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/customers/{pk}/"""
        data = self._payload(request)
        if data.get("email") and canonical_email(str(data["email"])) != canonical_email(pk):
            raise InvalidInput("email", "a customer's email cannot be changed")
        customer = self._service.update(pk, data)
        return render_response(None, CustomerSerializer(customer).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/customers/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/customers/{pk}/"""
        customer = self._service.delete(pk)
        return render_response(None, CustomerSerializer(customer).data)

    @staticmethod
    def _payload(request: Request) -> dict:
        if not isinstance(request.data, dict):
            raise InvalidInput("customer", "expected a JSON object")
        return request.data
