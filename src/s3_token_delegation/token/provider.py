"""Delegation token provider for S3 filesystems.

Runs on servers only. In ``STS_SESSION_TOKEN`` mode the long-term access key
and secret from the object-store configuration are exchanged for a session
token through STS ``GetSessionToken``; in ``NO_TOKEN`` mode (S3-compatible
stores such as MinIO) an empty token is handed out that only carries the
informational configuration clients need.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

import botocore.session
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from s3_token_delegation.config import load_settings
from s3_token_delegation.errors import InvalidConfigError
from s3_token_delegation.masking import mask_access_key
from s3_token_delegation.options import (
    ACCESS_KEY_ID,
    ACCESS_KEY_SECRET,
    ADDITIONAL_INFO_KEYS,
    REGION_KEY,
)
from s3_token_delegation.token.codec import credentials_to_json
from s3_token_delegation.token.types import Credentials, ObtainedSecurityToken, TokenMode

logger = logging.getLogger(__name__)

STSClientFactory = Callable[[str, str | None, str | None], Any]


def _default_sts_client(region: str, access_key: str | None, secret_key: str | None) -> Any:
    settings = load_settings()
    session = botocore.session.get_session()
    return session.create_client(
        "sts",
        region_name=region,
        aws_access_key_id=access_key,
        aws_secret_access_key=secret_key,
        config=Config(
            connect_timeout=settings.sts.connect_timeout_seconds,
            read_timeout=settings.sts.read_timeout_seconds,
            retries={"total_max_attempts": 1},
        ),
    )


def _to_epoch_millis(expiration: datetime) -> int:
    return int(expiration.timestamp() * 1000)


class DelegationTokenProvider:
    def __init__(
        self,
        scheme: str,
        conf: Mapping[str, str],
        mode: TokenMode,
        *,
        sts_client_factory: STSClientFactory | None = None,
    ) -> None:
        self._scheme = scheme
        self._mode = mode
        self._region = conf.get(REGION_KEY)
        if mode is TokenMode.STS_SESSION_TOKEN and self._region is None:
            raise InvalidConfigError("Region is not set.")
        self._access_key = conf.get(ACCESS_KEY_ID)
        self._secret_key = conf.get(ACCESS_KEY_SECRET)
        self._sts_client_factory = sts_client_factory or _default_sts_client

        self._additional_infos: dict[str, str] = {
            key: conf[key] for key in ADDITIONAL_INFO_KEYS if conf.get(key) is not None
        }
        self._default_token: ObtainedSecurityToken | None = None
        if mode is TokenMode.NO_TOKEN:
            self._default_token = ObtainedSecurityToken(
                scheme=scheme,
                token=b"",
                valid_until=None,
                additional_infos=self._additional_infos,
            )

    @property
    def mode(self) -> TokenMode:
        return self._mode

    def obtain_security_token(self) -> ObtainedSecurityToken:
        if self._mode is TokenMode.NO_TOKEN:
            if self._default_token is None:
                raise RuntimeError("NO_TOKEN provider has no default token")
            return self._default_token
        if self._mode is TokenMode.STS_SESSION_TOKEN:
            return self._obtain_sts_session_token()
        raise RuntimeError(f"Unknown token type: {self._mode!r}")

    def _obtain_sts_session_token(self) -> ObtainedSecurityToken:
        logger.info(
            "Obtaining session credentials token with access key: %s",
            mask_access_key(self._access_key),
        )
        if self._region is None:
            raise InvalidConfigError("Region is not set.")
        client = self._sts_client_factory(self._region, self._access_key, self._secret_key)

        params: dict[str, Any] = {}
        duration = load_settings().sts.session_duration_seconds
        if duration is not None:
            params["DurationSeconds"] = duration

        try:
            response = client.get_session_token(**params)
        except ClientError as exc:
            error = exc.response.get("Error", {})
            logger.warning(
                "STS GetSessionToken failed: region=%s, error=%s: %s",
                self._region,
                error.get("Code", "Unknown"),
                error.get("Message", str(exc)),
            )
            raise
        except BotoCoreError as exc:
            logger.warning("STS GetSessionToken failed: region=%s: %s", self._region, exc)
            raise

        sts_creds = response["Credentials"]
        credentials = Credentials(
            access_key_id=sts_creds["AccessKeyId"],
            secret_access_key=sts_creds["SecretAccessKey"],
            session_token=sts_creds["SessionToken"],
        )
        expiration: datetime = sts_creds["Expiration"]

        logger.info(
            "Session credentials obtained successfully with access key: %s expiration: %s",
            mask_access_key(credentials.access_key_id),
            expiration.isoformat(),
        )

        return ObtainedSecurityToken(
            scheme=self._scheme,
            token=credentials_to_json(credentials),
            valid_until=_to_epoch_millis(expiration),
            additional_infos=self._additional_infos,
        )
