"""Value types carried between token provider, codec and receiver."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from s3_token_delegation.masking import mask_access_key


class TokenMode(enum.Enum):
    """Kind of token a provider hands out."""

    NO_TOKEN = "no_token"  # S3-compatible stores without STS (e.g. MinIO)
    STS_SESSION_TOKEN = "sts_session_token"


@dataclass(frozen=True)
class Credentials:
    """Immutable temporary S3 credentials from STS."""

    access_key_id: str
    secret_access_key: str
    session_token: str

    def __post_init__(self) -> None:
        for name in ("access_key_id", "secret_access_key", "session_token"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ValueError(f"Credentials.{name} must be a non-empty string")

    def __repr__(self) -> str:
        return f"Credentials(access_key_id={mask_access_key(self.access_key_id)})"


@dataclass(frozen=True)
class ObtainedSecurityToken:
    """A token distributed from servers to clients.

    ``token`` is empty when the server does not delegate credentials; the
    token then only carries ``additional_infos`` (region, endpoint, ...).
    ``valid_until`` is epoch milliseconds and is set iff ``token`` is not
    empty.
    """

    scheme: str
    token: bytes
    valid_until: int | None = None
    additional_infos: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if (len(self.token) == 0) != (self.valid_until is None):
            raise ValueError(
                "valid_until must be set if and only if the token is not empty"
            )
        object.__setattr__(
            self, "additional_infos", MappingProxyType(dict(self.additional_infos))
        )

    @property
    def is_empty(self) -> bool:
        return len(self.token) == 0
