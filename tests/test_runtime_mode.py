"""Tests for client/server classification."""

from __future__ import annotations

import pytest

from s3_token_delegation.errors import InvalidConfigError
from s3_token_delegation.runtime_mode import RuntimeMode, classify, is_client


def test_empty_configuration_is_client() -> None:
    # Token delegation activated on the server side.
    assert classify({}) is RuntimeMode.CLIENT
    assert is_client({})


def test_client_prefixed_configuration_is_client() -> None:
    # S3-compatible store (e.g. MinIO) with token delegation deactivated.
    config = {
        "client.fs.s3.access-key": "fluss",
        "client.fs.s3.secret-key": "12345678",
        "client.fs.s3.aws.credentials.provider": "simple",
    }
    assert classify(config) is RuntimeMode.CLIENT


def test_token_delegation_server_configuration_is_server() -> None:
    config = {
        "fs.s3.enable-token-delegation": True,
        "s3.access-key": "fluss",
        "s3.secret-key": "12345678",
        "s3.endpoint": "s3://fluss-data/",
        "s3.region": "us-east-1",
    }
    assert classify(config) is RuntimeMode.SERVER
    assert not is_client(config)


def test_minio_server_configuration_is_server() -> None:
    config = {
        "s3.access-key": "fluss",
        "s3.secret-key": "12345678",
        "s3.endpoint": "http://minio:9000",
        "s3.path-style-access": "true",
        "s3.aws.credentials.provider": "simple",
    }
    assert classify(config) is RuntimeMode.SERVER


def test_mixed_configuration_is_invalid() -> None:
    config = {"s3.access-key": "fluss", "client.fs.s3.secret-key": "12345678"}
    with pytest.raises(InvalidConfigError, match="invalid configuration"):
        classify(config)
