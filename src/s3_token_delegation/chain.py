"""Credential provider chain assembly.

The chain is stored as a single comma-separated value under
``fs.s3a.aws.credentials.provider``. ``update_credential_providers``
prepends required providers exactly once; ``build_credential_resolver``
turns the final value into a botocore ``CredentialResolver``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping, Sequence

import botocore.session
from botocore.credentials import CredentialProvider, CredentialResolver, create_credential_resolver
from botocore.exceptions import UnknownCredentialError

from s3_token_delegation.errors import InvalidConfigError
from s3_token_delegation.options import (
    ACCESS_KEY_ID,
    ACCESS_KEY_SECRET,
    DYNAMIC_TEMPORARY_PROVIDER,
    PROVIDER_CONFIG_NAME,
    PROVIDER_SEPARATOR,
    SIMPLE_PROVIDER,
    SUPPORTED_SCHEMES,
)
from s3_token_delegation.token.credential_providers import (
    DynamicTemporaryCredentialProvider,
    SimpleCredentialProvider,
)
from s3_token_delegation.token.receiver import DelegationTokenReceiver

logger = logging.getLogger(__name__)


def parse_provider_chain(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(PROVIDER_SEPARATOR) if item.strip()]


def update_credential_providers(
    conf: MutableMapping[str, str],
    providers: Sequence[str],
) -> None:
    """Prepend ``providers`` to the chain in ``conf``, each at most once.

    The first element of ``providers`` ends up first in the chain. Presence is
    decided by exact entry match, so ``simple`` is still added to a chain
    that only holds ``simple-v2``.
    """
    logger.info("Updating credential providers in object store configuration")

    chain = conf.get(PROVIDER_CONFIG_NAME, "")
    for name in reversed(providers):
        if name in parse_provider_chain(chain):
            logger.debug("Provider %s already exists in chain", name)
            continue
        if not chain:
            logger.debug("Setting provider %s", name)
            chain = name
        else:
            chain = f"{name}{PROVIDER_SEPARATOR}{chain}"
            logger.debug("Prepending provider, new providers value: %s", chain)
        conf[PROVIDER_CONFIG_NAME] = chain

    logger.info("Updated credential providers in object store configuration successfully")


def set_credential_providers(
    scheme: str,
    conf: MutableMapping[str, str],
    providers: Sequence[str],
) -> None:
    if scheme not in SUPPORTED_SCHEMES:
        raise ValueError(f"Unsupported scheme: {scheme}")
    update_credential_providers(conf, providers)


def build_credential_resolver(
    conf: Mapping[str, str],
    receiver: DelegationTokenReceiver,
    session: botocore.session.Session | None = None,
) -> CredentialResolver:
    """Build a botocore resolver that consults the configured chain in order.

    Besides ``dynamic-temporary`` and ``simple``, entries may name any method
    of botocore's default chain (``env``, ``shared-credentials-file``,
    ``iam-role``, ...). An empty chain yields the static keys from ``conf``
    followed by botocore's default chain.
    """
    session = session or botocore.session.get_session()
    default_resolver = create_credential_resolver(session)
    simple = SimpleCredentialProvider(conf.get(ACCESS_KEY_ID), conf.get(ACCESS_KEY_SECRET))

    names = parse_provider_chain(conf.get(PROVIDER_CONFIG_NAME))
    if not names:
        return CredentialResolver(providers=[simple, *default_resolver.providers])

    providers: list[CredentialProvider] = []
    for name in names:
        if name == DYNAMIC_TEMPORARY_PROVIDER:
            providers.append(DynamicTemporaryCredentialProvider(receiver))
        elif name == SIMPLE_PROVIDER:
            providers.append(simple)
        else:
            try:
                providers.append(default_resolver.get_provider(name))
            except UnknownCredentialError as exc:
                raise InvalidConfigError(f"Unknown credential provider: {name}") from exc
    logger.debug("Credential provider chain: %s", [p.METHOD for p in providers])
    return CredentialResolver(providers=providers)
