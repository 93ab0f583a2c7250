"""Endpoint and credential configuration for the Fitbit client."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

import structlog

from . import FITBIT_API_BASE
from .auth import (
    FITBIT_AUTHORIZATION_ENDPOINT,
    FITBIT_REVOCATION_ENDPOINT,
    FITBIT_TOKEN_ENDPOINT,
)
from .response import FitbitConfigError

logger = structlog.get_logger(__name__)

CLIENT_ID_ENV = "FB_CLIENT_ID"
CLIENT_SECRET_ENV = "FB_CLIENT_SECRET"


@dataclass(frozen=True)
class FitbitEndpoints:
    """URLs used to build authorization, token and resource requests."""

    api_base: str = f"{FITBIT_API_BASE}/"
    authorization_endpoint: str = FITBIT_AUTHORIZATION_ENDPOINT
    token_endpoint: str = FITBIT_TOKEN_ENDPOINT
    revocation_endpoint: str = FITBIT_REVOCATION_ENDPOINT


@dataclass(frozen=True)
class ClientCredentials:
    """Fitbit application credentials.

    Values are opaque; nothing is validated locally and malformed
    credentials only surface as an error from the Fitbit servers.
    """

    client_id: str
    client_secret: str

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientCredentials":
        """Load credentials from ``FB_CLIENT_ID`` and ``FB_CLIENT_SECRET``.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Returns:
            The credentials found in the environment.

        Raises:
            FitbitConfigError: If either variable is unset or empty.
        """
        env = os.environ if environ is None else environ
        missing = [name for name in (CLIENT_ID_ENV, CLIENT_SECRET_ENV) if not env.get(name)]
        if missing:
            logger.error("fitbit_credentials_missing", variables=missing)
            raise FitbitConfigError(
                f"Missing Fitbit credentials: set {', '.join(missing)}"
            )
        return cls(client_id=env[CLIENT_ID_ENV], client_secret=env[CLIENT_SECRET_ENV])

    def masked_client_id(self) -> str:
        """Client id safe to put in log output."""
        return self.client_id[:8] + "..."
