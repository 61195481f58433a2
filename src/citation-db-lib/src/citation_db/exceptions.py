"""
citation_db.exceptions — Errors raised by the backend client factories and
provisioning scripts.

SDK failures are not wrapped: they surface as botocore ClientError and
callers branch on the AWS error code only.
"""

from __future__ import annotations

from botocore.exceptions import ClientError


class ConfigurationError(RuntimeError):
    """Raised when a required environment setting is missing."""


class ProvisioningError(RuntimeError):
    """
    Raised when a provisioning call succeeds but its response lacks the
    identifier that later steps depend on (user pool id, app client id).
    """


def error_code(exc: BaseException) -> str:
    """Return the AWS error code of a ClientError, or "" for anything else."""
    if not isinstance(exc, ClientError):
        return ""
    return str((exc.response.get("Error") or {}).get("Code", ""))
