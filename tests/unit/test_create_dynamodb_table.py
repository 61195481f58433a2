"""
tests/unit/test_create_dynamodb_table.py — DynamoDB table provisioning script.

Request payloads are asserted against a MagicMock client; the end-to-end run
and the already-exists short circuit go through moto's mock_aws.
"""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

_REGION = "us-east-1"


def _load_script() -> Any:
    repo_root = Path(__file__).resolve().parents[2]
    spec = importlib.util.spec_from_file_location(
        "create_dynamodb_table",
        repo_root / "scripts" / "create-dynamodb-table.py",
    )
    assert spec and spec.loader
    module = importlib.util.module_from_spec(spec)
    sys.modules["create_dynamodb_table"] = module
    spec.loader.exec_module(module)  # type: ignore[union-attr]
    return module


@pytest.fixture(scope="module")
def script() -> Any:
    return _load_script()


@pytest.fixture(autouse=True)
def aws_env(script: Any, monkeypatch: pytest.MonkeyPatch) -> None:
    """AWS env vars for moto; a developer .env.local must never leak in."""
    monkeypatch.setattr(script, "load_env_files", lambda: False)
    monkeypatch.setenv("AWS_REGION", _REGION)
    monkeypatch.setenv("AWS_DEFAULT_REGION", _REGION)
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.delenv("DYNAMODB_ENDPOINT", raising=False)
    monkeypatch.delenv("DYNAMODB_TABLE_NAME", raising=False)


def _client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


def _missing_table_client() -> MagicMock:
    client = MagicMock()
    client.describe_table.side_effect = _client_error(
        "ResourceNotFoundException", "DescribeTable"
    )
    return client


# ---------------------------------------------------------------------------
# Request payload
# ---------------------------------------------------------------------------


class TestCreateTableRequest:
    def test_composite_primary_key(self, script: Any) -> None:
        client = _missing_table_client()

        assert script.create_table(client, "citations") is True

        kwargs = client.create_table.call_args.kwargs
        assert kwargs["TableName"] == "citations"
        assert kwargs["KeySchema"] == [
            {"AttributeName": "PK", "KeyType": "HASH"},
            {"AttributeName": "SK", "KeyType": "RANGE"},
        ]

    def test_all_key_attributes_are_strings(self, script: Any) -> None:
        request = script.build_create_table_request("citations")
        definitions = {d["AttributeName"]: d["AttributeType"] for d in request["AttributeDefinitions"]}
        assert definitions == {"PK": "S", "SK": "S", "GSI1PK": "S", "GSI1SK": "S"}

    def test_single_secondary_index(self, script: Any) -> None:
        request = script.build_create_table_request("citations")
        (gsi,) = request["GlobalSecondaryIndexes"]
        assert gsi["IndexName"] == "GSI1"
        assert gsi["KeySchema"] == [
            {"AttributeName": "GSI1PK", "KeyType": "HASH"},
            {"AttributeName": "GSI1SK", "KeyType": "RANGE"},
        ]
        assert gsi["Projection"] == {"ProjectionType": "ALL"}
        assert gsi["ProvisionedThroughput"] == {"ReadCapacityUnits": 5, "WriteCapacityUnits": 5}

    def test_provisioned_capacity(self, script: Any) -> None:
        request = script.build_create_table_request("citations")
        assert request["BillingMode"] == "PROVISIONED"
        assert request["ProvisionedThroughput"] == {"ReadCapacityUnits": 5, "WriteCapacityUnits": 5}


# ---------------------------------------------------------------------------
# Existence check
# ---------------------------------------------------------------------------


class TestExistenceCheck:
    def test_existing_table_skips_create(self, script: Any) -> None:
        client = MagicMock()
        client.describe_table.return_value = {"Table": {"TableName": "citations"}}

        assert script.create_table(client, "citations") is False
        client.create_table.assert_not_called()

    def test_other_describe_errors_propagate(self, script: Any) -> None:
        client = MagicMock()
        client.describe_table.side_effect = _client_error("AccessDeniedException", "DescribeTable")

        with pytest.raises(ClientError):
            script.create_table(client, "citations")
        client.create_table.assert_not_called()

    def test_create_errors_propagate(self, script: Any) -> None:
        client = _missing_table_client()
        client.create_table.side_effect = _client_error("LimitExceededException", "CreateTable")

        with pytest.raises(ClientError):
            script.create_table(client, "citations")


# ---------------------------------------------------------------------------
# End to end against moto
# ---------------------------------------------------------------------------


class TestRun:
    @mock_aws
    def test_creates_table_with_gsi(self, script: Any) -> None:
        assert script.run() is True

        table = boto3.client("dynamodb", region_name=_REGION).describe_table(
            TableName="citations"
        )["Table"]
        assert [k["AttributeName"] for k in table["KeySchema"]] == ["PK", "SK"]
        assert [g["IndexName"] for g in table["GlobalSecondaryIndexes"]] == ["GSI1"]
        assert table["ProvisionedThroughput"]["ReadCapacityUnits"] == 5

    @mock_aws
    def test_second_run_is_a_noop(self, script: Any) -> None:
        assert script.run() is True
        assert script.run() is False

        tables = boto3.client("dynamodb", region_name=_REGION).list_tables()["TableNames"]
        assert tables == ["citations"]

    @mock_aws
    def test_table_name_override(self, script: Any, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DYNAMODB_TABLE_NAME", "citations-dev")
        script.run()

        tables = boto3.client("dynamodb", region_name=_REGION).list_tables()["TableNames"]
        assert tables == ["citations-dev"]

    @mock_aws
    def test_env_local_is_loaded_before_settings(
        self, script: Any, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def _load_env_local() -> bool:
            monkeypatch.setenv("DYNAMODB_TABLE_NAME", "citations-from-env-local")
            return True

        monkeypatch.setattr(script, "load_env_files", _load_env_local)
        script.run()

        tables = boto3.client("dynamodb", region_name=_REGION).list_tables()["TableNames"]
        assert tables == ["citations-from-env-local"]


class TestMain:
    def test_exit_zero_on_success(self, script: Any, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(script, "run", lambda: True)
        with pytest.raises(SystemExit) as excinfo:
            script.main()
        assert excinfo.value.code == 0

    def test_exit_one_on_failure(
        self, script: Any, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        def _raise() -> bool:
            raise _client_error("AccessDeniedException", "DescribeTable")

        monkeypatch.setattr(script, "run", _raise)
        with pytest.raises(SystemExit) as excinfo:
            script.main()
        assert excinfo.value.code == 1
        assert "Failed to create DynamoDB table" in capsys.readouterr().err
