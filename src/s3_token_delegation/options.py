"""Configuration key names shared by the plugin, provider and receiver."""

from __future__ import annotations

S3_SCHEME = "s3"
SUPPORTED_SCHEMES = frozenset({"s3", "s3a"})

# Keys of the object-store configuration (after re-keying by the plugin).
OBJECT_STORE_CONFIG_PREFIX = "fs.s3a."
PROVIDER_CONFIG_NAME = "fs.s3a.aws.credentials.provider"
ACCESS_KEY_ID = "fs.s3a.access.key"
ACCESS_KEY_SECRET = "fs.s3a.secret.key"
REGION_KEY = "fs.s3a.region"
ENDPOINT_KEY = "fs.s3a.endpoint"
PATH_STYLE_ACCESS_KEY = "fs.s3a.path.style.access"

# Informational keys forwarded to clients with every token. Never secrets.
ADDITIONAL_INFO_KEYS = (REGION_KEY, ENDPOINT_KEY, PATH_STYLE_ACCESS_KEY)

# Keys of the user-facing filesystem configuration.
ENABLE_TOKEN_DELEGATION_KEY = "fs.s3.enable-token-delegation"
CONFIG_PREFIXES = ("s3.", "s3a.", "fs.s3a.")
CLIENT_PREFIX = "client.fs."
CLIENT_WHITELISTED_OPTIONS = frozenset(
    {
        "access-key",
        "access.key",
        "secret-key",
        "secret.key",
        "aws.credentials.provider",
    }
)

MIRRORED_CONFIG_KEYS = (
    ("fs.s3a.access-key", ACCESS_KEY_ID),
    ("fs.s3a.secret-key", ACCESS_KEY_SECRET),
    ("fs.s3a.path-style-access", PATH_STYLE_ACCESS_KEY),
)

# Provider chain identifiers understood by chain.build_credential_resolver.
DYNAMIC_TEMPORARY_PROVIDER = "dynamic-temporary"
SIMPLE_PROVIDER = "simple"
PROVIDER_SEPARATOR = ","
