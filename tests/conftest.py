"""
Shared pytest fixtures: moto-backed DynamoDB tables and in-memory stores.
"""

import os
from typing import Any, Dict, List, Optional, Sequence

import boto3
import pytest
from moto import mock_aws

from attr_backfill.core.errors import TransportFailure
from attr_backfill.models.schemas import ScanPage

TABLE_NAME = "AgentEndpoint"
REGION = "us-east-1"


def make_arn(account_id: str = "886436930021", agent: str = "a1") -> str:
    return f"arn:aws:genesis:us-west-2:{account_id}:agent/{agent}"


class MemoryStore:
    """In-memory table: offset tokens, optional per-key update failures."""

    def __init__(self,
                 items: List[Dict[str, Any]],
                 key_attributes: Sequence[str] = ("id",),
                 fail_keys: Sequence[Any] = (),
                 table_name: str = "memory"):
        self.table_name = table_name
        self.items = [dict(i) for i in items]
        self.key_attributes = list(key_attributes)
        self.fail_keys = set(fail_keys)
        self.scan_calls: List[tuple] = []
        self.update_calls: List[tuple] = []

    async def scan_page(self, limit: int, continuation_token: Optional[Any] = None) -> ScanPage:
        self.scan_calls.append((limit, continuation_token))
        start = 0 if continuation_token is None else continuation_token["offset"]
        chunk = self.items[start:start + limit]
        end = start + len(chunk)
        token = {"offset": end} if end < len(self.items) else None
        return ScanPage(items=[dict(i) for i in chunk], next_token=token, has_more=token is not None)

    async def update_attribute(self, key: Dict[str, Any], attribute_name: str, value: Any) -> Dict[str, Any]:
        self.update_calls.append((dict(key), attribute_name, value))
        if key.get(self.key_attributes[0]) in self.fail_keys:
            raise TransportFailure("update", self.table_name, "ProvisionedThroughputExceededException")
        for item in self.items:
            if all(item.get(k) == key.get(k) for k in self.key_attributes):
                item[attribute_name] = value
                return dict(item)
        raise TransportFailure("update", self.table_name, "key does not match table schema")


class ScriptedStore:
    """Returns prepared pages in order; raises ``error`` once pages run out."""

    def __init__(self, pages: List[ScanPage], error: Optional[Exception] = None):
        self.pages = list(pages)
        self.error = error
        self.scan_calls: List[tuple] = []

    async def scan_page(self, limit: int, continuation_token: Optional[Any] = None) -> ScanPage:
        self.scan_calls.append((limit, continuation_token))
        if not self.pages:
            raise self.error or AssertionError("scanned past the last page")
        return self.pages.pop(0)


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    os.environ['AWS_ACCESS_KEY_ID'] = 'testing'
    os.environ['AWS_SECRET_ACCESS_KEY'] = 'testing'
    os.environ['AWS_SECURITY_TOKEN'] = 'testing'
    os.environ['AWS_SESSION_TOKEN'] = 'testing'
    os.environ['AWS_DEFAULT_REGION'] = REGION


@pytest.fixture
def dynamodb_table(aws_credentials):
    """Mock AgentEndpoint table keyed on AgentArn (HASH) / EndpointName (RANGE)."""
    with mock_aws():
        dynamodb = boto3.resource('dynamodb', region_name=REGION)
        table = dynamodb.create_table(
            TableName=TABLE_NAME,
            AttributeDefinitions=[
                {"AttributeName": "AgentArn", "AttributeType": "S"},
                {"AttributeName": "EndpointName", "AttributeType": "S"},
            ],
            KeySchema=[
                {"AttributeName": "AgentArn", "KeyType": "HASH"},
                {"AttributeName": "EndpointName", "KeyType": "RANGE"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )
        table.wait_until_exists()
        yield table


@pytest.fixture
def seeded_table(dynamodb_table):
    """Seven endpoints: five missing AccountId (one with a bad ARN), two already carrying it."""
    with dynamodb_table.batch_writer() as batch:
        for i in range(4):
            batch.put_item(Item={"AgentArn": make_arn(agent=f"agent-{i}"), "EndpointName": "DEFAULT"})
        batch.put_item(Item={"AgentArn": make_arn("12345", "bad"), "EndpointName": "DEFAULT"})
        batch.put_item(Item={"AgentArn": make_arn(agent="done"), "EndpointName": "DEFAULT",
                             "AccountId": "886436930021"})
        batch.put_item(Item={"AgentArn": make_arn(agent="empty"), "EndpointName": "DEFAULT",
                             "AccountId": None})
    return dynamodb_table
