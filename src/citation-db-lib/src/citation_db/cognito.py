"""
citation_db.cognito — Cognito Identity Provider client factory.

One client per process, created lazily from BackendSettings and reused for
every sign-up, sign-in and admin call the application makes.
"""

from __future__ import annotations

from typing import Any

import boto3
from aws_lambda_powertools import Logger

from citation_db.config import BackendSettings

logger = Logger(service="citation-db")

_cognito_client: Any = None


def create_cognito_client(settings: BackendSettings | None = None) -> Any:
    """Build a new cognito-idp client from settings (default: environment)."""
    settings = settings or BackendSettings.from_env()
    credentials = settings.credentials()
    logger.debug(
        "Creating Cognito client",
        region=settings.cognito_region,
        explicit_credentials=bool(credentials),
    )
    return boto3.client("cognito-idp", region_name=settings.cognito_region, **credentials)


def get_cognito_client() -> Any:
    """Lazy initialization of the shared cognito-idp client."""
    global _cognito_client
    if _cognito_client is None:
        _cognito_client = create_cognito_client()
    return _cognito_client


def reset_clients() -> None:
    """Forget the shared client so the next call rebuilds it from the environment."""
    global _cognito_client
    _cognito_client = None
