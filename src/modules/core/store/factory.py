"""Store client factory.

Chooses the store implementation from ``settings.STORE_BACKEND``:

- ``dynamodb`` (default): boto3 ``Table`` resource, region and optional
  endpoint (DynamoDB Local) taken from settings.
- ``memory``: process-local tables, used by the test suite.
"""

from __future__ import annotations

import boto3
import structlog
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from modules.core.store.dynamodb import DynamoDBStoreClient
from modules.core.store.interfaces import IStoreClient
from modules.core.store.memory import InMemoryStoreClient

logger = structlog.get_logger(__name__)

DYNAMODB = "dynamodb"
MEMORY = "memory"


def get_store_client(table_name: str) -> IStoreClient:
    """Return a store client bound to ``table_name``."""
    backend = settings.STORE_BACKEND
    if backend == MEMORY:
        return InMemoryStoreClient(table_name)
    if backend == DYNAMODB:
        resource = boto3.resource(
            "dynamodb",
            region_name=settings.AWS_REGION,
            endpoint_url=settings.DYNAMODB_ENDPOINT_URL or None,
        )
        return DynamoDBStoreClient(resource.Table(table_name))

    logger.error("store.unknown_backend", backend=backend)
    raise ImproperlyConfigured(f"Unknown STORE_BACKEND '{backend}'.")
