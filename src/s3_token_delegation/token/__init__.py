"""Delegation token types, codec, provider and receiver."""

from s3_token_delegation.token.codec import (
    CredentialsCodecError,
    credentials_from_json,
    credentials_to_json,
)
from s3_token_delegation.token.credential_providers import (
    DynamicTemporaryCredentialProvider,
    SimpleCredentialProvider,
)
from s3_token_delegation.token.provider import DelegationTokenProvider
from s3_token_delegation.token.receiver import (
    AdditionalInfosNotReceivedError,
    DelegationTokenReceiver,
    get_receiver,
)
from s3_token_delegation.token.types import Credentials, ObtainedSecurityToken, TokenMode

__all__ = [
    "AdditionalInfosNotReceivedError",
    "Credentials",
    "CredentialsCodecError",
    "DelegationTokenProvider",
    "DelegationTokenReceiver",
    "DynamicTemporaryCredentialProvider",
    "ObtainedSecurityToken",
    "SimpleCredentialProvider",
    "TokenMode",
    "credentials_from_json",
    "credentials_to_json",
    "get_receiver",
]
