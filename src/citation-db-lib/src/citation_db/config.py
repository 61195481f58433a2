"""
citation_db.config — Backend settings read from the process environment.

Local runs may keep settings in `.env.local` in the working directory the
process starts from (normally the repository root). The file is loaded
with python-dotenv and never overrides variables already exported in the
shell.

Variables:
    COGNITO_REGION          Cognito region (falls back to AWS_REGION)
    AWS_REGION              DynamoDB region, default us-east-1
    AWS_ACCESS_KEY_ID       Explicit credentials, used only when both
    AWS_SECRET_ACCESS_KEY   halves of the pair are set
    DYNAMODB_ENDPOINT       Custom DynamoDB endpoint (DynamoDB Local)
    DYNAMODB_TABLE_NAME     Table name, default "citations"
    DATABASE_URL            SQLAlchemy connection string
    APP_ENV                 development | test | production
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_REGION = "us-east-1"
DEFAULT_TABLE_NAME = "citations"
DEFAULT_ENVIRONMENT = "development"
ENV_LOCAL_FILENAME = ".env.local"


def _env(name: str) -> str | None:
    """Read an environment variable, treating blank values as unset."""
    value = os.environ.get(name, "").strip()
    return value or None


def load_env_files(*, repo_root: Path | None = None) -> bool:
    """Load `.env.local` from repo_root (default: current working directory).

    Returns True when a file was loaded.
    """
    env_local_path = (repo_root or Path.cwd()) / ENV_LOCAL_FILENAME
    if not env_local_path.exists():
        return False
    load_dotenv(dotenv_path=env_local_path, override=False)
    return True


@dataclass(frozen=True)
class BackendSettings:
    cognito_region: str
    aws_region: str
    aws_access_key_id: str | None
    aws_secret_access_key: str | None
    dynamodb_endpoint: str | None
    dynamodb_table_name: str
    database_url: str | None
    environment: str

    @classmethod
    def from_env(cls) -> BackendSettings:
        aws_region = _env("AWS_REGION") or DEFAULT_REGION
        return cls(
            cognito_region=_env("COGNITO_REGION") or aws_region,
            aws_region=aws_region,
            aws_access_key_id=_env("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=_env("AWS_SECRET_ACCESS_KEY"),
            dynamodb_endpoint=_env("DYNAMODB_ENDPOINT"),
            dynamodb_table_name=_env("DYNAMODB_TABLE_NAME") or DEFAULT_TABLE_NAME,
            database_url=_env("DATABASE_URL"),
            environment=(_env("APP_ENV") or DEFAULT_ENVIRONMENT).lower(),
        )

    def credentials(self) -> dict[str, str]:
        """boto3 credential kwargs, empty unless both key halves are set.

        An empty dict leaves boto3 on its default credential chain
        (profile, SSO, instance role).
        """
        if self.aws_access_key_id and self.aws_secret_access_key:
            return {
                "aws_access_key_id": self.aws_access_key_id,
                "aws_secret_access_key": self.aws_secret_access_key,
            }
        return {}

    @property
    def is_development(self) -> bool:
        return self.environment == DEFAULT_ENVIRONMENT
