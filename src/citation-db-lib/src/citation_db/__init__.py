"""
citation_db — Backend clients for the citation application.

Process-wide clients for the identity provider (Cognito), the key-value
store (DynamoDB) and the relational database (SQLAlchemy), each built from
environment configuration on first use.
"""

from citation_db.cognito import create_cognito_client, get_cognito_client
from citation_db.config import BackendSettings, load_env_files
from citation_db.database import Base, Database, get_database, reset_database
from citation_db.dynamodb import (
    create_dynamodb_client,
    create_dynamodb_resource,
    get_dynamodb_client,
    get_dynamodb_resource,
    get_table,
    put_document,
    remove_none_values,
)
from citation_db.exceptions import ConfigurationError, ProvisioningError, error_code

__all__ = [
    "Base",
    "BackendSettings",
    "ConfigurationError",
    "Database",
    "ProvisioningError",
    "create_cognito_client",
    "create_dynamodb_client",
    "create_dynamodb_resource",
    "error_code",
    "get_cognito_client",
    "get_database",
    "get_dynamodb_client",
    "get_dynamodb_resource",
    "get_table",
    "load_env_files",
    "put_document",
    "remove_none_values",
    "reset_database",
]
