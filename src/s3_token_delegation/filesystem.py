"""S3 filesystem handle exposing delegation tokens."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any
from urllib.parse import urlparse

from s3_token_delegation.token.provider import DelegationTokenProvider
from s3_token_delegation.token.types import ObtainedSecurityToken


class S3FileSystem:
    """Wraps an initialized S3 client; the token provider is built on first use."""

    def __init__(
        self,
        client: Any,
        uri: str,
        provider_factory: Callable[[], DelegationTokenProvider],
    ) -> None:
        self._client = client
        self._uri = uri
        self._provider_factory = provider_factory
        self._provider: DelegationTokenProvider | None = None
        self._lock = threading.Lock()

    @property
    def client(self) -> Any:
        return self._client

    @property
    def uri(self) -> str:
        return self._uri

    @property
    def bucket(self) -> str:
        return urlparse(self._uri).netloc

    def _get_provider(self) -> DelegationTokenProvider:
        if self._provider is not None:
            return self._provider

        with self._lock:
            if self._provider is None:
                self._provider = self._provider_factory()
            return self._provider

    def obtain_security_token(self) -> ObtainedSecurityToken:
        return self._get_provider().obtain_security_token()
