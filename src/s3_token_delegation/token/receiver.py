"""Process-wide receiver for delegation tokens distributed to clients."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping, MutableMapping
from types import MappingProxyType

from s3_token_delegation.masking import mask_access_key
from s3_token_delegation.options import ENABLE_TOKEN_DELEGATION_KEY, S3_SCHEME
from s3_token_delegation.token.codec import credentials_from_json
from s3_token_delegation.token.types import Credentials, ObtainedSecurityToken

logger = logging.getLogger(__name__)


class AdditionalInfosNotReceivedError(RuntimeError):
    """Raised when additional infos are copied before any token arrived."""


class DelegationTokenReceiver:
    """Holds the last received credentials and additional infos.

    Both slots are replaced by reference under ``_lock``; readers never take
    the lock and always see either the previous or the new value.
    """

    def __init__(self, scheme: str = S3_SCHEME) -> None:
        self._scheme = scheme
        self._lock = threading.Lock()
        self._credentials: Credentials | None = None
        self._additional_infos: Mapping[str, str] | None = None

    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def additional_infos(self) -> Mapping[str, str] | None:
        return self._additional_infos

    def get_credentials(self) -> Credentials | None:
        return self._credentials

    def on_new_tokens_obtained(self, token: ObtainedSecurityToken) -> None:
        if token.scheme != self._scheme:
            raise ValueError(
                f"Token for scheme {token.scheme!r} delivered to {self._scheme!r} receiver"
            )
        logger.info("Trying to update session credentials and additional infos")

        additional_infos = MappingProxyType(dict(token.additional_infos))
        if not token.is_empty:
            credentials = credentials_from_json(token.token)
            with self._lock:
                self._credentials = credentials
                self._additional_infos = additional_infos
            logger.info(
                "Session credentials updated successfully with access key: %s. "
                "Updated additional infos: %s",
                mask_access_key(credentials.access_key_id),
                dict(additional_infos),
            )
        else:
            with self._lock:
                self._additional_infos = additional_infos
            logger.info(
                "Received an empty token. This usually indicates that %s has been "
                "disabled. Updated additional infos only: %s",
                ENABLE_TOKEN_DELEGATION_KEY,
                dict(additional_infos),
            )

    def update_additional_infos(self, conf: MutableMapping[str, str]) -> None:
        """Copy the received additional infos into an object-store configuration."""
        logger.info("Updating additional infos in object store configuration")

        additional_infos = self._additional_infos
        if additional_infos is None:
            logger.error("%s receiver has not received any additional infos.", self._scheme)
            raise AdditionalInfosNotReceivedError("Expected additionalInfos to be not null.")

        for key, value in additional_infos.items():
            logger.debug("Setting configuration '%s' = '%s'", key, value)
            conf[key] = value

        logger.info("Updated additional infos in object store configuration successfully")

    def reset(self) -> None:
        with self._lock:
            self._credentials = None
            self._additional_infos = None


_receivers: dict[str, DelegationTokenReceiver] = {}
_receivers_lock = threading.Lock()


def get_receiver(scheme: str = S3_SCHEME) -> DelegationTokenReceiver:
    """Return the process-wide receiver for ``scheme``."""
    receiver = _receivers.get(scheme)
    if receiver is not None:
        return receiver
    with _receivers_lock:
        receiver = _receivers.get(scheme)
        if receiver is None:
            receiver = DelegationTokenReceiver(scheme)
            _receivers[scheme] = receiver
        return receiver
