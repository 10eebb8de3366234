"""S3 credential delegation: STS session tokens minted on servers, consumed by clients."""

from s3_token_delegation.chain import (
    build_credential_resolver,
    set_credential_providers,
    update_credential_providers,
)
from s3_token_delegation.errors import InvalidConfigError
from s3_token_delegation.filesystem import S3FileSystem
from s3_token_delegation.plugin import S3FileSystemPlugin
from s3_token_delegation.runtime_mode import RuntimeMode, classify, is_client

__version__ = "0.1.0"

__all__ = [
    "InvalidConfigError",
    "RuntimeMode",
    "S3FileSystem",
    "S3FileSystemPlugin",
    "__version__",
    "build_credential_resolver",
    "classify",
    "is_client",
    "set_credential_providers",
    "update_credential_providers",
]
