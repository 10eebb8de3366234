from __future__ import annotations

import pytest

from s3_token_delegation import config
from s3_token_delegation.token.receiver import DelegationTokenReceiver


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "load_dotenv", lambda **_: None)
    for key in config.ENV_KEYS.values():
        monkeypatch.delenv(key, raising=False)
    config._load_settings_cached.cache_clear()
    yield
    config._load_settings_cached.cache_clear()


@pytest.fixture
def receiver() -> DelegationTokenReceiver:
    return DelegationTokenReceiver("s3")
