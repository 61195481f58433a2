"""
citation_db.dynamodb — DynamoDB client and document-table factory.

The low-level client is used for control-plane calls (describe/create table).
Application reads and writes go through the boto3 resource `Table`, which
marshals native Python values (str, int, Decimal, dict, list, set) to and
from DynamoDB attribute values.

All tables follow the single-table convention: string `PK` hash key, string
`SK` range key, and a `GSI1` index over `GSI1PK` / `GSI1SK`.
"""

from __future__ import annotations

from typing import Any

import boto3
from aws_lambda_powertools import Logger

from citation_db.config import BackendSettings

logger = Logger(service="citation-db")

_dynamodb_client: Any = None
_dynamodb_resource: Any = None


def _client_kwargs(settings: BackendSettings) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"region_name": settings.aws_region, **settings.credentials()}
    if settings.dynamodb_endpoint:
        kwargs["endpoint_url"] = settings.dynamodb_endpoint
    return kwargs


def create_dynamodb_client(settings: BackendSettings | None = None) -> Any:
    """Build a DynamoDB client, routed to DYNAMODB_ENDPOINT when it is set."""
    settings = settings or BackendSettings.from_env()
    logger.debug(
        "Creating DynamoDB client",
        region=settings.aws_region,
        endpoint=settings.dynamodb_endpoint,
    )
    return boto3.client("dynamodb", **_client_kwargs(settings))


def create_dynamodb_resource(settings: BackendSettings | None = None) -> Any:
    """Build a DynamoDB resource, routed to DYNAMODB_ENDPOINT when it is set."""
    settings = settings or BackendSettings.from_env()
    return boto3.resource("dynamodb", **_client_kwargs(settings))


def get_dynamodb_client() -> Any:
    """Lazy initialization of the shared DynamoDB client."""
    global _dynamodb_client
    if _dynamodb_client is None:
        _dynamodb_client = create_dynamodb_client()
    return _dynamodb_client


def get_dynamodb_resource() -> Any:
    """Lazy initialization of the shared DynamoDB resource."""
    global _dynamodb_resource
    if _dynamodb_resource is None:
        _dynamodb_resource = create_dynamodb_resource()
    return _dynamodb_resource


def get_table(table_name: str | None = None) -> Any:
    """Return the document Table handle (default: DYNAMODB_TABLE_NAME)."""
    name = table_name or BackendSettings.from_env().dynamodb_table_name
    return get_dynamodb_resource().Table(name)


def remove_none_values(value: Any) -> Any:
    """Drop None-valued attributes from a document, recursively.

    The resource serializer would otherwise store None as a NULL attribute.
    Empty strings and empty collections pass through unchanged.
    """
    if isinstance(value, dict):
        return {k: remove_none_values(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [remove_none_values(v) for v in value if v is not None]
    return value


def put_document(item: dict[str, Any], table_name: str | None = None) -> None:
    """Write a document after stripping None-valued attributes."""
    get_table(table_name).put_item(Item=remove_none_values(item))


def reset_clients() -> None:
    """Forget the shared client and resource."""
    global _dynamodb_client, _dynamodb_resource
    _dynamodb_client = None
    _dynamodb_resource = None
