"""Minimal client for the Fitbit Web API."""

from __future__ import annotations

FITBIT_API_BASE = "https://api.fitbit.com"

from .auth import Scope, build_login_url, token_from_response  # noqa: E402
from .client import FitbitAPIClient, HttpMethod  # noqa: E402
from .config import ClientCredentials, FitbitEndpoints  # noqa: E402
from .response import FitbitAPIError, FitbitConfigError, FitbitResponse  # noqa: E402

__all__ = [
    "FITBIT_API_BASE",
    "ClientCredentials",
    "FitbitAPIClient",
    "FitbitAPIError",
    "FitbitConfigError",
    "FitbitEndpoints",
    "FitbitResponse",
    "HttpMethod",
    "Scope",
    "build_login_url",
    "token_from_response",
]
