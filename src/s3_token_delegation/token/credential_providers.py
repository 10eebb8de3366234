"""botocore credential providers backing the S3 client's provider chain."""

from __future__ import annotations

import logging

from botocore.credentials import CredentialProvider, ReadOnlyCredentials
from botocore.credentials import Credentials as BotocoreCredentials

from s3_token_delegation.options import DYNAMIC_TEMPORARY_PROVIDER, SIMPLE_PROVIDER
from s3_token_delegation.token.receiver import DelegationTokenReceiver
from s3_token_delegation.token.types import Credentials

logger = logging.getLogger(__name__)


class ReceiverBackedCredentials(BotocoreCredentials):
    """botocore credentials that always reflect the receiver's latest token.

    The signer calls ``get_frozen_credentials`` for every request, so tokens
    delivered after the client was built are picked up without rebuilding it.
    """

    def __init__(self, receiver: DelegationTokenReceiver, method: str) -> None:
        # Base __init__ would pin the current values as plain attributes.
        self._receiver = receiver
        self.method = method
        self.account_id = None

    def _snapshot(self) -> Credentials:
        credentials = self._receiver.get_credentials()
        if credentials is None:
            raise RuntimeError("Delegated credentials disappeared from the receiver")
        return credentials

    @property
    def access_key(self) -> str:
        return self._snapshot().access_key_id

    @property
    def secret_key(self) -> str:
        return self._snapshot().secret_access_key

    @property
    def token(self) -> str:
        return self._snapshot().session_token

    def get_frozen_credentials(self) -> ReadOnlyCredentials:
        credentials = self._snapshot()
        return ReadOnlyCredentials(
            credentials.access_key_id,
            credentials.secret_access_key,
            credentials.session_token,
        )


class DynamicTemporaryCredentialProvider(CredentialProvider):
    """Serves credentials delegated by the server through the token receiver."""

    METHOD = DYNAMIC_TEMPORARY_PROVIDER
    CANONICAL_NAME = "DynamicTemporary"

    def __init__(self, receiver: DelegationTokenReceiver) -> None:
        super().__init__()
        self._receiver = receiver

    def load(self) -> BotocoreCredentials | None:
        if self._receiver.get_credentials() is None:
            logger.debug("No delegated credentials received yet")
            return None
        return ReceiverBackedCredentials(self._receiver, self.METHOD)


class SimpleCredentialProvider(CredentialProvider):
    """Static long-term access key and secret from the object-store config."""

    METHOD = SIMPLE_PROVIDER
    CANONICAL_NAME = "Simple"

    def __init__(self, access_key: str | None, secret_key: str | None) -> None:
        super().__init__()
        self._access_key = access_key
        self._secret_key = secret_key

    def load(self) -> BotocoreCredentials | None:
        if not self._access_key or not self._secret_key:
            return None
        return BotocoreCredentials(self._access_key, self._secret_key, method=self.METHOD)
