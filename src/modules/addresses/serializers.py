"""Address DRF serializer for API output.

Renders ``AddressDTO`` instances; input parsing is done by the Pydantic
DTOs in ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers


class AddressSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    city = serializers.CharField(allow_blank=True, required=False)
    state = serializers.CharField(allow_blank=True, required=False)
    apt = serializers.CharField(allow_blank=True, required=False)
    number = serializers.CharField(allow_blank=True, required=False)
    street = serializers.CharField(allow_blank=True, required=False)
    zip_code = serializers.CharField(allow_blank=True, required=False)
