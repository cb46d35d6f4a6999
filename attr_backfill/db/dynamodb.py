from typing import Any, Dict, Optional
import asyncio
import threading

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from attr_backfill.core.config import settings
from attr_backfill.core.errors import TransportFailure
from attr_backfill.models.schemas import Record, ScanPage


class DynamoRepository:
    """Thin wrapper around a DynamoDB table using boto3. Blocking I/O is offloaded to a thread."""

    def __init__(self,
                 table_name: Optional[str] = None,
                 region_name: Optional[str] = None,
                 endpoint_url: Optional[str] = None):
        self.table_name = settings.dynamodb_table if table_name is None else table_name
        self.region_name = settings.aws_region if region_name is None else region_name
        self.endpoint_url = settings.dynamodb_endpoint_url if endpoint_url is None else endpoint_url
        # boto3 sessions and resources are not thread-safe: one of each per worker thread
        self._local = threading.local()

    def _get_table(self) -> Any:
        table = getattr(self._local, "table", None)
        if table is None:
            session = boto3.Session()
            resource = session.resource("dynamodb", region_name=self.region_name, endpoint_url=self.endpoint_url)
            # boto3 uses dynamic attributes; type checkers may not know about Table
            table = resource.Table(self.table_name)  # type: ignore[attr-defined]
            self._local.table = table
        return table

    # --- sync implementations (run in thread) ---
    def _scan_sync(self, limit: int, continuation_token: Optional[Any] = None) -> ScanPage:
        params: Dict[str, Any] = {"Limit": limit}
        if continuation_token is not None:
            params["ExclusiveStartKey"] = continuation_token
        try:
            resp = self._get_table().scan(**params)
        except (ClientError, BotoCoreError) as e:
            raise TransportFailure("scan", self.table_name, str(e)) from e
        next_token = resp.get("LastEvaluatedKey")
        return ScanPage(items=resp.get("Items", []), next_token=next_token, has_more=next_token is not None)

    def _update_attribute_sync(self, key: Record, attribute_name: str, value: Any) -> Record:
        # Unconditional single-attribute write: last write wins, nothing else touched
        try:
            resp = self._get_table().update_item(
                Key=key,
                UpdateExpression="SET #attr = :val",
                ExpressionAttributeNames={"#attr": attribute_name},
                ExpressionAttributeValues={":val": value},
                ReturnValues="ALL_NEW",
            )
        except (ClientError, BotoCoreError) as e:
            raise TransportFailure("update", self.table_name, str(e)) from e
        return resp.get("Attributes", {})

    # --- async API ---
    async def scan_page(self, limit: int, continuation_token: Optional[Any] = None) -> ScanPage:
        return await asyncio.to_thread(self._scan_sync, limit, continuation_token)

    async def update_attribute(self, key: Record, attribute_name: str, value: Any) -> Record:
        return await asyncio.to_thread(self._update_attribute_sync, key, attribute_name, value)
