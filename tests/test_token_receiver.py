"""Tests for DelegationTokenReceiver."""

from __future__ import annotations

import threading

import pytest

from s3_token_delegation.token import receiver as receiver_module
from s3_token_delegation.token.codec import credentials_to_json
from s3_token_delegation.token.receiver import (
    AdditionalInfosNotReceivedError,
    DelegationTokenReceiver,
    get_receiver,
)
from s3_token_delegation.token.types import Credentials, ObtainedSecurityToken


def _token(creds: Credentials | None, infos: dict[str, str]) -> ObtainedSecurityToken:
    if creds is None:
        return ObtainedSecurityToken(scheme="s3", token=b"", additional_infos=infos)
    return ObtainedSecurityToken(
        scheme="s3",
        token=credentials_to_json(creds),
        valid_until=1_767_225_600_000,
        additional_infos=infos,
    )


def test_initial_state_is_empty(receiver: DelegationTokenReceiver) -> None:
    assert receiver.get_credentials() is None
    assert receiver.additional_infos is None


def test_non_empty_token_updates_credentials_and_infos(
    receiver: DelegationTokenReceiver,
) -> None:
    creds = Credentials("ASIA1", "secret-1", "token-1")

    receiver.on_new_tokens_obtained(_token(creds, {"fs.s3a.region": "us-east-1"}))

    assert receiver.get_credentials() == creds
    assert dict(receiver.additional_infos or {}) == {"fs.s3a.region": "us-east-1"}


def test_empty_token_keeps_credentials_but_replaces_infos(
    receiver: DelegationTokenReceiver,
) -> None:
    creds = Credentials("ASIA1", "secret-1", "token-1")
    receiver.on_new_tokens_obtained(
        _token(creds, {"fs.s3a.region": "us-east-1", "fs.s3a.endpoint": "https://s3"})
    )
    stored = receiver.get_credentials()
    assert stored == creds

    receiver.on_new_tokens_obtained(_token(None, {"fs.s3a.region": "eu-central-1"}))

    assert receiver.get_credentials() is stored
    # Replaced wholesale, not merged.
    assert dict(receiver.additional_infos or {}) == {"fs.s3a.region": "eu-central-1"}


def test_empty_token_without_prior_credentials(receiver: DelegationTokenReceiver) -> None:
    receiver.on_new_tokens_obtained(_token(None, {"fs.s3a.endpoint": "http://minio:9000"}))

    assert receiver.get_credentials() is None
    assert dict(receiver.additional_infos or {}) == {"fs.s3a.endpoint": "http://minio:9000"}


def test_token_for_other_scheme_is_rejected(receiver: DelegationTokenReceiver) -> None:
    token = ObtainedSecurityToken(scheme="oss", token=b"")

    with pytest.raises(ValueError, match="oss"):
        receiver.on_new_tokens_obtained(token)


def test_update_additional_infos_copies_received_values(
    receiver: DelegationTokenReceiver,
) -> None:
    receiver.on_new_tokens_obtained(
        _token(None, {"fs.s3a.region": "eu-central-1", "fs.s3a.endpoint": "http://localhost:9000"})
    )
    conf = {"fs.s3a.aws.credentials.provider": "dynamic-temporary"}

    receiver.update_additional_infos(conf)

    assert conf == {
        "fs.s3a.aws.credentials.provider": "dynamic-temporary",
        "fs.s3a.region": "eu-central-1",
        "fs.s3a.endpoint": "http://localhost:9000",
    }


def test_update_additional_infos_before_any_token_fails(
    receiver: DelegationTokenReceiver,
) -> None:
    with pytest.raises(AdditionalInfosNotReceivedError, match="Expected additionalInfos"):
        receiver.update_additional_infos({})


def test_reset_clears_state(receiver: DelegationTokenReceiver) -> None:
    receiver.on_new_tokens_obtained(_token(Credentials("A", "B", "C"), {}))

    receiver.reset()

    assert receiver.get_credentials() is None
    assert receiver.additional_infos is None


def test_get_receiver_returns_process_wide_instance(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(receiver_module, "_receivers", {})

    first = get_receiver("s3")

    assert get_receiver("s3") is first
    assert get_receiver("s3a") is not first
    assert get_receiver("s3a").scheme == "s3a"


def test_concurrent_readers_never_see_torn_credentials(
    receiver: DelegationTokenReceiver,
) -> None:
    stop = threading.Event()
    torn: list[Credentials] = []

    def read() -> None:
        while not stop.is_set():
            creds = receiver.get_credentials()
            if creds is None:
                continue
            suffix = creds.access_key_id.removeprefix("ASIA")
            if creds.secret_access_key != f"secret-{suffix}" or (
                creds.session_token != f"token-{suffix}"
            ):
                torn.append(creds)

    readers = [threading.Thread(target=read) for _ in range(4)]
    for thread in readers:
        thread.start()
    for i in range(200):
        receiver.on_new_tokens_obtained(
            _token(Credentials(f"ASIA{i}", f"secret-{i}", f"token-{i}"), {})
        )
    stop.set()
    for thread in readers:
        thread.join()

    assert torn == []
    assert receiver.get_credentials() == Credentials("ASIA199", "secret-199", "token-199")
