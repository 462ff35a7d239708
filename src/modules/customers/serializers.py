"""Customer DRF serializer for API output.

Renders ``CustomerDTO`` instances with the address nested.  Input is
parsed by the Pydantic DTOs in ``dtos.py``; the serializer only shapes
responses (and documents them in the OpenAPI schema).
"""

from __future__ import annotations

from rest_framework import serializers

from modules.addresses.serializers import AddressSerializer


class CustomerSerializer(serializers.Serializer):
    email = serializers.EmailField()
    first_name = serializers.CharField()
    last_name = serializers.CharField()
    phone_number = serializers.CharField(allow_blank=True, required=False)
    address = AddressSerializer(allow_null=True, required=False)
