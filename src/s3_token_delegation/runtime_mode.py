"""Decide whether a filesystem is initialized by a client or a server."""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping

from s3_token_delegation.errors import InvalidConfigError
from s3_token_delegation.options import CLIENT_PREFIX

logger = logging.getLogger(__name__)


class RuntimeMode(enum.Enum):
    CLIENT = "client"
    SERVER = "server"


def classify(config: Mapping[str, object]) -> RuntimeMode:
    """Classify ``config`` by its keys alone.

    Client: the configuration is empty, or every key starts with
    ``client.fs.``. An empty configuration is only seen on clients while the
    server delegates tokens; a server always has either full credentials or
    a credential provider configured.

    Server: at least one key, none of them client-prefixed.

    Anything else is an invalid configuration.
    """
    keys = list(config.keys())
    if all(key.startswith(CLIENT_PREFIX) for key in keys):
        logger.debug("File system is initialized by a client with configuration keys %s", keys)
        return RuntimeMode.CLIENT
    if not any(key.startswith(CLIENT_PREFIX) for key in keys):
        logger.debug("File system is initialized by a server with configuration keys %s", keys)
        return RuntimeMode.SERVER

    logger.error("Detected invalid configuration with keys %s", keys)
    raise InvalidConfigError("Cannot initialize file system due to invalid configuration.")


def is_client(config: Mapping[str, object]) -> bool:
    return classify(config) is RuntimeMode.CLIENT
