"""
create-cognito-user-pool.py — One-shot Cognito user pool provisioning.

Creates, in order:
  - User pool "citation-app-users" (email usernames, strong password policy)
  - App client "citation-app-client" (password, refresh and SRP auth flows)
  - Groups: Admins (precedence 1), Users (precedence 2)
  - Seed users admin@example.com (Admins) and user@example.com (Users)
    with permanent passwords

Prints the pool and client ids to copy into .env.local.

Safe to re-run. Cognito itself allows several pools with the same name, so
the script lists pools first and treats one already named
"citation-app-users" as "already exists": nothing is created. An existing
seed user (UsernameExistsException) also ends the run as a no-op.

Usage:
    pip install -e .
    python scripts/create-cognito-user-pool.py
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Any

from botocore.exceptions import ClientError

from citation_db.cognito import create_cognito_client
from citation_db.config import BackendSettings, load_env_files
from citation_db.exceptions import ProvisioningError, error_code

logger = logging.getLogger("create-cognito-user-pool")
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

POOL_NAME = "citation-app-users"
CLIENT_NAME = "citation-app-client"
TEMPORARY_PASSWORD = "TempPass123!"  # pragma: allowlist secret

AUTH_FLOWS: tuple[str, ...] = (
    "ALLOW_USER_PASSWORD_AUTH",
    "ALLOW_REFRESH_TOKEN_AUTH",
    "ALLOW_USER_SRP_AUTH",
)


@dataclass(frozen=True)
class GroupSpec:
    name: str
    description: str
    precedence: int


@dataclass(frozen=True)
class SeedUser:
    email: str
    display_name: str
    role: str
    password: str
    group: str


GROUPS: tuple[GroupSpec, ...] = (
    GroupSpec("Admins", "Administrator users with full access", 1),
    GroupSpec("Users", "Regular users with standard access", 2),
)

SEED_USERS: tuple[SeedUser, ...] = (
    SeedUser(
        email="admin@example.com",
        display_name="Admin User",
        role="ADMIN",
        password="AdminPass123!",  # pragma: allowlist secret
        group="Admins",
    ),
    SeedUser(
        email="user@example.com",
        display_name="Regular User",
        role="USER",
        password="UserPass123!",  # pragma: allowlist secret
        group="Users",
    ),
)


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


def build_user_pool_request() -> dict[str, Any]:
    return {
        "PoolName": POOL_NAME,
        "Policies": {
            "PasswordPolicy": {
                "MinimumLength": 8,
                "RequireUppercase": True,
                "RequireLowercase": True,
                "RequireNumbers": True,
                "RequireSymbols": True,
                "TemporaryPasswordValidityDays": 7,
            }
        },
        "AutoVerifiedAttributes": ["email"],
        "UsernameAttributes": ["email"],
        "UsernameConfiguration": {"CaseSensitive": False},
        "Schema": [
            {
                "Name": "email",
                "AttributeDataType": "String",
                "Required": True,
                "Mutable": True,
            },
            {
                "Name": "name",
                "AttributeDataType": "String",
                "Required": False,
                "Mutable": True,
            },
            {
                "Name": "role",
                "AttributeDataType": "String",
                "Required": False,
                "Mutable": True,
                "StringAttributeConstraints": {"MinLength": "1", "MaxLength": "256"},
            },
        ],
        "MfaConfiguration": "OPTIONAL",
        "AccountRecoverySetting": {
            "RecoveryMechanisms": [{"Priority": 1, "Name": "verified_email"}],
        },
    }


def build_user_pool_client_request(user_pool_id: str) -> dict[str, Any]:
    return {
        "UserPoolId": user_pool_id,
        "ClientName": CLIENT_NAME,
        "GenerateSecret": False,
        "ExplicitAuthFlows": list(AUTH_FLOWS),
        "PreventUserExistenceErrors": "ENABLED",
        "RefreshTokenValidity": 30,
        "AccessTokenValidity": 60,
        "IdTokenValidity": 60,
        "TokenValidityUnits": {
            "RefreshToken": "days",
            "AccessToken": "minutes",
            "IdToken": "minutes",
        },
    }


# ---------------------------------------------------------------------------
# Provisioning steps
# ---------------------------------------------------------------------------


def find_user_pool_id(client: Any, pool_name: str) -> str | None:
    """Return the id of an existing pool with this name, or None."""
    paginator = client.get_paginator("list_user_pools")
    for page in paginator.paginate(PaginationConfig={"PageSize": 60}):
        for pool in page.get("UserPools", []):
            if pool.get("Name") == pool_name:
                return str(pool["Id"])
    return None


def _create_user_pool(client: Any) -> str:
    response = client.create_user_pool(**build_user_pool_request())
    user_pool_id = (response.get("UserPool") or {}).get("Id")
    if not user_pool_id:
        raise ProvisioningError("Failed to create user pool")
    logger.info("User Pool created: %s", user_pool_id)
    return str(user_pool_id)


def _create_app_client(client: Any, user_pool_id: str) -> str:
    response = client.create_user_pool_client(**build_user_pool_client_request(user_pool_id))
    client_id = (response.get("UserPoolClient") or {}).get("ClientId")
    if not client_id:
        raise ProvisioningError("Failed to create user pool client")
    logger.info("User Pool Client created: %s", client_id)
    return str(client_id)


def _create_groups(client: Any, user_pool_id: str) -> None:
    for group in GROUPS:
        client.create_group(
            GroupName=group.name,
            UserPoolId=user_pool_id,
            Description=group.description,
            Precedence=group.precedence,
        )
        logger.info("%s group created", group.name)


def _seed_user(client: Any, user_pool_id: str, user: SeedUser) -> None:
    client.admin_create_user(
        UserPoolId=user_pool_id,
        Username=user.email,
        UserAttributes=[
            {"Name": "email", "Value": user.email},
            {"Name": "email_verified", "Value": "true"},
            {"Name": "name", "Value": user.display_name},
            {"Name": "custom:role", "Value": user.role},
        ],
        TemporaryPassword=TEMPORARY_PASSWORD,
        MessageAction="SUPPRESS",
    )
    logger.info("Test user created: %s", user.email)

    client.admin_set_user_password(
        UserPoolId=user_pool_id,
        Username=user.email,
        Password=user.password,
        Permanent=True,
    )
    logger.info("Permanent password set for %s", user.email)

    client.admin_add_user_to_group(
        UserPoolId=user_pool_id,
        Username=user.email,
        GroupName=user.group,
    )
    logger.info("%s added to %s group", user.email, user.group)


def _print_summary(user_pool_id: str, client_id: str) -> None:
    _log("\n=== Configuration Summary ===")
    _log(f"User Pool ID: {user_pool_id}")
    _log(f"Client ID: {client_id}")
    _log("\nTest Users:")
    for user in SEED_USERS:
        _log(f"{user.role.title()}: {user.email} / {user.password}")
    _log("\nUpdate your .env.local with:")
    _log(f"COGNITO_USER_POOL_ID={user_pool_id}")
    _log(f"COGNITO_CLIENT_ID={client_id}")


def create_user_pool(client: Any) -> dict[str, str] | None:
    """Provision pool, app client, groups and seed users.

    Returns {"userPoolId", "clientId"} on success, or None when the pool or
    its users already exist.
    """
    try:
        existing_id = find_user_pool_id(client, POOL_NAME)
        if existing_id:
            logger.info("User pool %s already exists: %s", POOL_NAME, existing_id)
            return None

        logger.info("Creating Cognito User Pool...")
        user_pool_id = _create_user_pool(client)
        client_id = _create_app_client(client, user_pool_id)
        _create_groups(client, user_pool_id)
        for user in SEED_USERS:
            _seed_user(client, user_pool_id, user)
    except ClientError as exc:
        if error_code(exc) == "UsernameExistsException":
            logger.info("User pool or users may already exist")
            return None
        logger.exception("Error creating user pool")
        raise
    except Exception:
        logger.exception("Error creating user pool")
        raise

    _print_summary(user_pool_id, client_id)
    return {"userPoolId": user_pool_id, "clientId": client_id}


def _log(msg: str) -> None:
    print(msg, flush=True)


def run(*, client: Any = None) -> dict[str, str] | None:
    """Load configuration and provision the user pool.

    Args:
        client: cognito-idp client override.  Used in tests.
    """
    load_env_files()
    client = client or create_cognito_client(BackendSettings.from_env())
    return create_user_pool(client)


def main() -> None:
    """CLI entrypoint: exit 0 on success, 1 on any failure."""
    try:
        run()
    except Exception as exc:
        print(f"Failed to create Cognito User Pool: {exc}", file=sys.stderr)
        sys.exit(1)
    _log("\nCognito User Pool setup complete")
    sys.exit(0)


if __name__ == "__main__":
    main()
