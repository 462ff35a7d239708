"""DynamoDB implementation of the store client.

Thin wrapper over a boto3 ``Table`` resource.  ``botocore`` errors are
logged and re-raised untouched: classification happens at the HTTP
boundary, never here.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import structlog
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from modules.core.store.interfaces import IStoreClient, Key, Record, UpdateAssignment

logger = structlog.get_logger(__name__)


class DynamoDBStoreClient(IStoreClient):
    """Store client bound to one DynamoDB table.

    ``table`` is a ``boto3.resource("dynamodb").Table(...)`` instance
    (injected so tests can pass a ``MagicMock``).
    """

    def __init__(self, table: Any) -> None:
        self._table = table
        self.table_name = table.name

    def get(self, key: Key) -> Optional[Record]:
        try:
            response = self._table.get_item(Key=key)
        except (BotoCoreError, ClientError) as exc:
            logger.error("dynamodb.get_failed", table=self.table_name, error=str(exc))
            raise
        return response.get("Item")

    def put(self, record: Record) -> None:
        try:
            self._table.put_item(Item=record)
        except (BotoCoreError, ClientError) as exc:
            logger.error("dynamodb.put_failed", table=self.table_name, error=str(exc))
            raise

    def scan(self, filter_attribute: str, value: Any) -> List[Record]:
        """Scan the whole table, following ``LastEvaluatedKey`` internally."""
        params: Dict[str, Any] = {"FilterExpression": Attr(filter_attribute).eq(value)}
        items: List[Record] = []
        try:
            while True:
                response = self._table.scan(**params)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                params["ExclusiveStartKey"] = last_key
        except (BotoCoreError, ClientError) as exc:
            logger.error("dynamodb.scan_failed", table=self.table_name, error=str(exc))
            raise
        return items

    def update(self, key: Key, assignments: Sequence[UpdateAssignment]) -> Record:
        """Issue ``SET #attr0 = :val0, ...`` guarded by the key's existence."""
        names = {a.name_ref: a.name for a in assignments}
        values = {a.value_ref: a.value for a in assignments}
        update_expression = "SET " + ", ".join(
            f"{a.name_ref} = {a.value_ref}" for a in assignments
        )

        conditions = []
        for index, key_name in enumerate(key):
            ref = f"#key{index}"
            names[ref] = key_name
            conditions.append(f"attribute_exists({ref})")

        logger.debug(
            "dynamodb.update_expression",
            table=self.table_name,
            expression=update_expression,
        )
        try:
            response = self._table.update_item(
                Key=key,
                UpdateExpression=update_expression,
                ConditionExpression=" AND ".join(conditions),
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="ALL_NEW",
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("dynamodb.update_failed", table=self.table_name, error=str(exc))
            raise
        return response["Attributes"]

    def ping(self) -> None:
        self._table.load()
