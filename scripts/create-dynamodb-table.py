"""
create-dynamodb-table.py — One-shot DynamoDB table provisioning.

Creates the citations table (single-table design):
  - Primary key: PK (HASH), SK (RANGE)
  - GSI1:        GSI1PK (HASH), GSI1SK (RANGE), all attributes projected
  - Provisioned: 5 RCU / 5 WCU on the table and on GSI1

Skips creation when the table already exists.

Usage:
    pip install -e .
    python scripts/create-dynamodb-table.py

Reads AWS_REGION, DYNAMODB_ENDPOINT, DYNAMODB_TABLE_NAME and credentials
from the environment or .env.local.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

from botocore.exceptions import ClientError

from citation_db.config import BackendSettings, load_env_files
from citation_db.dynamodb import create_dynamodb_client
from citation_db.exceptions import error_code

logger = logging.getLogger("create-dynamodb-table")
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

GSI1_NAME = "GSI1"
READ_CAPACITY_UNITS = 5
WRITE_CAPACITY_UNITS = 5


def build_create_table_request(table_name: str) -> dict[str, Any]:
    """Return the CreateTable request body for the citations table."""
    throughput = {
        "ReadCapacityUnits": READ_CAPACITY_UNITS,
        "WriteCapacityUnits": WRITE_CAPACITY_UNITS,
    }
    return {
        "TableName": table_name,
        "KeySchema": [
            {"AttributeName": "PK", "KeyType": "HASH"},
            {"AttributeName": "SK", "KeyType": "RANGE"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "PK", "AttributeType": "S"},
            {"AttributeName": "SK", "AttributeType": "S"},
            {"AttributeName": "GSI1PK", "AttributeType": "S"},
            {"AttributeName": "GSI1SK", "AttributeType": "S"},
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": GSI1_NAME,
                "KeySchema": [
                    {"AttributeName": "GSI1PK", "KeyType": "HASH"},
                    {"AttributeName": "GSI1SK", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
                "ProvisionedThroughput": dict(throughput),
            }
        ],
        "BillingMode": "PROVISIONED",
        "ProvisionedThroughput": dict(throughput),
    }


def table_exists(client: Any, table_name: str) -> bool:
    """Describe the table; False only on ResourceNotFoundException."""
    try:
        client.describe_table(TableName=table_name)
        return True
    except ClientError as exc:
        if error_code(exc) == "ResourceNotFoundException":
            return False
        raise


def create_table(client: Any, table_name: str) -> bool:
    """Create the table unless it exists. Returns True when it was created."""
    try:
        if table_exists(client, table_name):
            logger.info("Table %s already exists", table_name)
            return False

        client.create_table(**build_create_table_request(table_name))
    except Exception:
        logger.exception("Error creating table %s", table_name)
        raise

    logger.info("Table %s created successfully", table_name)
    _log("Table structure:")
    _log("- Primary Key: PK (HASH), SK (RANGE)")
    _log(f"- {GSI1_NAME}: GSI1PK (HASH), GSI1SK (RANGE) - for author-based queries")
    return True


def _log(msg: str) -> None:
    print(msg, flush=True)


def run(*, client: Any = None) -> bool:
    """Load configuration and provision the table.

    Args:
        client: DynamoDB client override.  Used in tests.
    """
    load_env_files()
    settings = BackendSettings.from_env()
    client = client or create_dynamodb_client(settings)
    return create_table(client, settings.dynamodb_table_name)


def main() -> None:
    """CLI entrypoint: exit 0 on success, 1 on any failure."""
    try:
        run()
    except Exception as exc:
        print(f"Failed to create DynamoDB table: {exc}", file=sys.stderr)
        sys.exit(1)
    _log("DynamoDB table setup complete")
    sys.exit(0)


if __name__ == "__main__":
    main()
