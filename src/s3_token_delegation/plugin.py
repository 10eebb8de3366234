"""Filesystem plugin wiring token delegation into S3 client construction.

Configuration handed to ``create`` uses the filesystem option names
(``s3.access-key``, ``s3.region``, ...). Clients receive the same options
with an extra ``client.fs.`` prefix, of which only a small whitelist is
honoured so a client cannot reconfigure the filesystem.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, MutableMapping
from typing import Any

import boto3
import botocore.session
from botocore.config import Config

from s3_token_delegation.chain import build_credential_resolver, set_credential_providers
from s3_token_delegation.config import TRUE_VALUES, load_settings
from s3_token_delegation.filesystem import S3FileSystem
from s3_token_delegation.options import (
    CLIENT_PREFIX,
    CLIENT_WHITELISTED_OPTIONS,
    CONFIG_PREFIXES,
    DYNAMIC_TEMPORARY_PROVIDER,
    ENABLE_TOKEN_DELEGATION_KEY,
    ENDPOINT_KEY,
    MIRRORED_CONFIG_KEYS,
    OBJECT_STORE_CONFIG_PREFIX,
    PATH_STYLE_ACCESS_KEY,
    PROVIDER_CONFIG_NAME,
    REGION_KEY,
    S3_SCHEME,
    SIMPLE_PROVIDER,
)
from s3_token_delegation.runtime_mode import is_client
from s3_token_delegation.token.provider import DelegationTokenProvider
from s3_token_delegation.token.receiver import DelegationTokenReceiver, get_receiver
from s3_token_delegation.token.types import TokenMode

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Mapping[str, str], DelegationTokenReceiver], Any]

TOKEN_DELEGATION_DEFAULT_CREDENTIAL_PROVIDERS = (SIMPLE_PROVIDER,)


def _to_config_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _as_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES


def create_s3_client(conf: Mapping[str, str], receiver: DelegationTokenReceiver) -> Any:
    """Create a boto3 S3 client whose credentials come from the configured chain."""
    botocore_session = botocore.session.Session()
    resolver = build_credential_resolver(conf, receiver, botocore_session)
    botocore_session.register_component("credential_provider", resolver)
    session = boto3.Session(botocore_session=botocore_session)

    client_config: dict[str, Any] = {}
    if _as_bool(conf.get(PATH_STYLE_ACCESS_KEY, "false")):
        client_config["s3"] = {"addressing_style": "path"}

    return session.client(
        "s3",
        region_name=conf.get(REGION_KEY),
        endpoint_url=conf.get(ENDPOINT_KEY) or None,
        config=Config(**client_config),
    )


class S3FileSystemPlugin:
    def __init__(
        self,
        scheme: str = S3_SCHEME,
        *,
        receiver: DelegationTokenReceiver | None = None,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._scheme = scheme
        self._receiver = receiver or get_receiver(scheme)
        self._client_factory = client_factory or create_s3_client

    @property
    def scheme(self) -> str:
        return self._scheme

    def create(self, fs_uri: str, config: Mapping[str, object]) -> S3FileSystem:
        conf = self._mirror_config_keys(self.build_object_store_config(config))

        client = is_client(config)
        if client:
            # Whether the server delegates tokens is unknown here; the dynamic
            # provider yields nothing when no credentials were delegated.
            set_credential_providers(self._scheme, conf, [DYNAMIC_TEMPORARY_PROVIDER])
            self._receiver.update_additional_infos(conf)
            use_token_delegation = False
        else:
            use_token_delegation = _as_bool(
                config.get(
                    ENABLE_TOKEN_DELEGATION_KEY,
                    load_settings().delegation.enable_token_delegation,
                )
            )
            if use_token_delegation:
                # The server authenticates with the same long-term keys it
                # exchanges for client session tokens.
                set_credential_providers(
                    self._scheme, conf, TOKEN_DELEGATION_DEFAULT_CREDENTIAL_PROVIDERS
                )

        logger.info(
            "Object store configuration for %s: keys=%s, providers=%s",
            fs_uri,
            sorted(conf),
            conf.get(PROVIDER_CONFIG_NAME),
        )

        s3_client = self._client_factory(conf, self._receiver)

        if client:

            def provider_factory() -> DelegationTokenProvider:
                raise RuntimeError(
                    "Unexpected usage of delegation token provider. Delegation token "
                    "provider should only be used on the server side."
                )

        else:
            mode = TokenMode.STS_SESSION_TOKEN if use_token_delegation else TokenMode.NO_TOKEN

            def provider_factory() -> DelegationTokenProvider:
                return DelegationTokenProvider(self._scheme, conf, mode)

        return S3FileSystem(s3_client, fs_uri, provider_factory)

    def build_object_store_config(self, config: Mapping[str, object] | None) -> dict[str, str]:
        """Re-key filesystem options under ``fs.s3a.``.

        Client options are only taken over when whitelisted; everything else
        under the client prefix is logged and dropped.
        """
        conf: dict[str, str] = {PROVIDER_CONFIG_NAME: ""}
        if not config:
            return conf

        for key, value in config.items():
            for prefix in CONFIG_PREFIXES:
                if key.startswith(prefix):
                    target = OBJECT_STORE_CONFIG_PREFIX + key[len(prefix) :]
                    conf[target] = _to_config_value(value)
                    logger.debug("Adding config entry for %s as %s", key, target)

                client_prefix = CLIENT_PREFIX + prefix
                if key.startswith(client_prefix):
                    option = key[len(client_prefix) :]
                    if option in CLIENT_WHITELISTED_OPTIONS:
                        target = OBJECT_STORE_CONFIG_PREFIX + option
                        conf[target] = _to_config_value(value)
                        logger.debug(
                            "Adding whitelisted client config entry for %s as %s", key, target
                        )
                    else:
                        logger.warning(
                            "Client passed non-whitelisted config option %s. Ignoring it",
                            option,
                        )
        return conf

    @staticmethod
    def _mirror_config_keys(conf: MutableMapping[str, str]) -> MutableMapping[str, str]:
        for source, target in MIRRORED_CONFIG_KEYS:
            value = conf.get(source)
            if value is not None:
                conf[target] = value
        return conf
