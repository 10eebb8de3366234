"""Tests for S3FileSystem lazy provider construction."""

from __future__ import annotations

import threading
import time

from s3_token_delegation.filesystem import S3FileSystem
from s3_token_delegation.token.provider import DelegationTokenProvider
from s3_token_delegation.token.types import TokenMode


def test_bucket_and_accessors() -> None:
    client = object()
    fs = S3FileSystem(client, "s3://test-bucket/tests-1", lambda: None)  # type: ignore[arg-type,return-value]

    assert fs.client is client
    assert fs.bucket == "test-bucket"
    assert fs.uri == "s3://test-bucket/tests-1"


def test_provider_is_built_once_under_concurrency() -> None:
    calls = {"count": 0}

    def factory() -> DelegationTokenProvider:
        calls["count"] += 1
        time.sleep(0.05)
        return DelegationTokenProvider("s3", {"fs.s3a.region": "us-east-1"}, TokenMode.NO_TOKEN)

    fs = S3FileSystem(object(), "s3://bucket", factory)
    barrier = threading.Barrier(8)
    tokens = []

    def obtain() -> None:
        barrier.wait()
        tokens.append(fs.obtain_security_token())

    threads = [threading.Thread(target=obtain) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert calls["count"] == 1
    assert len(tokens) == 8
    assert all(token is tokens[0] for token in tokens)


def test_provider_factory_failure_is_retried_on_next_call() -> None:
    attempts = {"count": 0}

    def factory() -> DelegationTokenProvider:
        attempts["count"] += 1
        if attempts["count"] == 1:
            raise RuntimeError("boom")
        return DelegationTokenProvider("s3", {}, TokenMode.NO_TOKEN)

    fs = S3FileSystem(object(), "s3://bucket", factory)

    try:
        fs.obtain_security_token()
    except RuntimeError:
        pass
    token = fs.obtain_security_token()

    assert token.token == b""
    assert attempts["count"] == 2
