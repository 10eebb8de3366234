"""JSON codec for delegated credentials."""

from __future__ import annotations

import json

from s3_token_delegation.token.types import Credentials

_ACCESS_KEY_ID = "access_key_id"
_ACCESS_KEY_SECRET = "access_key_secret"
_SECURITY_TOKEN = "security_token"


class CredentialsCodecError(ValueError):
    """Raised when token bytes do not hold serialized credentials."""


def credentials_to_json(credentials: Credentials) -> bytes:
    payload = {
        _ACCESS_KEY_ID: credentials.access_key_id,
        _ACCESS_KEY_SECRET: credentials.secret_access_key,
        _SECURITY_TOKEN: credentials.session_token,
    }
    return json.dumps(payload, separators=(",", ":")).encode("utf-8")


def credentials_from_json(data: bytes) -> Credentials:
    try:
        payload = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise CredentialsCodecError(f"Token is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise CredentialsCodecError("Token JSON must be an object")

    try:
        return Credentials(
            access_key_id=payload[_ACCESS_KEY_ID],
            secret_access_key=payload[_ACCESS_KEY_SECRET],
            session_token=payload[_SECURITY_TOKEN],
        )
    except KeyError as exc:
        raise CredentialsCodecError(f"Token JSON is missing field {exc}") from exc
    except ValueError as exc:
        raise CredentialsCodecError(str(exc)) from exc
