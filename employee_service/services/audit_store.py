"""
Audit log store backed by a DynamoDB table.

Table schema:
- Partition Key: PartitionKey (employee department)
- Sort Key: RowKey (correlation id, unique per write)

One item is written per employee mutation. Nothing here reads entries back.
"""

import asyncio
import logging
from typing import Any, Dict

import boto3
from boto3.dynamodb.types import TypeSerializer
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Request

from employee_service.config import Settings
from employee_service.models import AuditLogEntry

logger = logging.getLogger(__name__)


KEY_SCHEMA = [
    {"AttributeName": "PartitionKey", "KeyType": "HASH"},
    {"AttributeName": "RowKey", "KeyType": "RANGE"},
]

ATTRIBUTE_DEFINITIONS = [
    {"AttributeName": "PartitionKey", "AttributeType": "S"},
    {"AttributeName": "RowKey", "AttributeType": "S"},
]


def create_dynamodb_client(settings: Settings) -> BaseClient:
    """Build the low-level DynamoDB client from settings."""
    client_config = dict(region_name=settings.aws_region)

    if settings.dynamodb_endpoint_url:
        client_config["endpoint_url"] = settings.dynamodb_endpoint_url

    return boto3.client("dynamodb", **client_config)


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


class AuditEntryEncodingError(ValueError):
    """An audit entry holds a value DynamoDB cannot store."""


class AuditLogStore:
    """
    Key-value store receiving one audit entry per mutation.

    boto3 calls block, so the async methods run them in a worker thread.
    """

    def __init__(self, client: BaseClient, table_name: str):
        self.client = client
        self.table_name = table_name
        self._serializer = TypeSerializer()

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuditLogStore":
        return cls(create_dynamodb_client(settings), settings.audit_table_name)

    async def ensure_table_ready(self) -> None:
        """Create the backing table if it is absent. Safe to call repeatedly."""
        await asyncio.to_thread(self._ensure_table_ready)

    def _ensure_table_ready(self) -> None:
        try:
            response = self.client.describe_table(TableName=self.table_name)
            status = response["Table"]["TableStatus"]
            logger.info(f"Audit table '{self.table_name}' already exists ({status})")
            if status != "ACTIVE":
                # Another process is still creating it
                self.client.get_waiter("table_exists").wait(TableName=self.table_name)
            return
        except ClientError as e:
            if _error_code(e) != "ResourceNotFoundException":
                raise

        logger.info(f"Creating audit table '{self.table_name}'...")

        try:
            self.client.create_table(
                TableName=self.table_name,
                KeySchema=KEY_SCHEMA,
                AttributeDefinitions=ATTRIBUTE_DEFINITIONS,
                BillingMode="PAY_PER_REQUEST",
            )
        except ClientError as e:
            # Another process created it between describe and create
            if _error_code(e) != "ResourceInUseException":
                raise

        self.client.get_waiter("table_exists").wait(TableName=self.table_name)
        logger.info(f"Audit table '{self.table_name}' is ready")

    def serialize(self, entry: AuditLogEntry) -> Dict[str, Dict[str, Any]]:
        """
        Convert an entry into DynamoDB attribute-value format.

        Raises:
            AuditEntryEncodingError: If a value has no DynamoDB representation
        """
        try:
            return {
                key: self._serializer.serialize(value)
                for key, value in entry.to_item().items()
            }
        except TypeError as e:
            raise AuditEntryEncodingError(
                f"Audit entry {entry.row_key} cannot be serialized: {e}"
            ) from e

    async def upsert(self, entry: AuditLogEntry) -> None:
        """
        Write the entry, replacing any item with the same keys.

        Raises:
            AuditEntryEncodingError: If the entry cannot be serialized
            ClientError, BotoCoreError: If the write fails
        """
        item = self.serialize(entry)

        await asyncio.to_thread(
            self.client.put_item,
            TableName=self.table_name,
            Item=item,
        )

        logger.debug(
            f"Audit entry written: table={self.table_name}, "
            f"partition={entry.partition_key}, row={entry.row_key}, action={entry.action.value}"
        )

    async def health_check(self) -> bool:
        """Check that the audit table is reachable."""
        try:
            await asyncio.to_thread(self.client.describe_table, TableName=self.table_name)
            return True
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Audit store health check failed: {e}")
            return False


async def get_audit_store(request: Request) -> AuditLogStore:
    """Dependency injection for the audit log store."""
    return request.app.state.audit_store
