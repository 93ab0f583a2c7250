"""Fitbit OAuth2 helpers: endpoints, login URLs and token responses."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterable, Optional, Union
from urllib.parse import quote, urlencode

import structlog
from requests_oauth2client import BearerToken

from . import FITBIT_API_BASE
from .response import FitbitAPIError, FitbitResponse

__all__ = [
    "FITBIT_AUTHORIZATION_ENDPOINT",
    "FITBIT_REVOCATION_ENDPOINT",
    "FITBIT_TOKEN_ENDPOINT",
    "Scope",
    "build_login_url",
    "token_from_response",
]

logger = structlog.get_logger(__name__)

# FitBit OAuth2 endpoints
FITBIT_AUTHORIZATION_ENDPOINT = "https://www.fitbit.com/oauth2/authorize"
FITBIT_TOKEN_ENDPOINT = f"{FITBIT_API_BASE}/oauth2/token"
FITBIT_REVOCATION_ENDPOINT = f"{FITBIT_API_BASE}/oauth2/revoke"


class Scope(str, Enum):
    """Scopes Fitbit documents for the authorization page.

    Listed for convenience only; scopes are never validated locally.
    """

    ACTIVITY = "activity"
    HEARTRATE = "heartrate"
    LOCATION = "location"
    NUTRITION = "nutrition"
    PROFILE = "profile"
    SETTINGS = "settings"
    SLEEP = "sleep"
    SOCIAL = "social"
    WEIGHT = "weight"


ScopeLike = Union[Scope, str]


def _scope_value(scope: ScopeLike) -> str:
    return scope.value if isinstance(scope, Scope) else str(scope)


def build_login_url(
    authorization_endpoint: str,
    client_id: str,
    redirect_uri: str,
    scopes: Iterable[ScopeLike],
    response_type: str = "code",
    expires_in: Optional[int] = None,
    prompt: str = "none",
    state: Optional[str] = None,
) -> str:
    """Build the URL of the Fitbit authorization page.

    Args:
        authorization_endpoint: Base URL of the authorization page.
        client_id: The Fitbit application client ID.
        redirect_uri: Where Fitbit sends the user after consent.
        scopes: Requested scopes, joined in order by a single space.
        response_type: ``code`` or ``token``.
        expires_in: Token lifetime in seconds, only sent when given.
        prompt: ``none``, ``consent``, ``login`` or ``login consent``.
        state: Opaque value echoed back on the redirect, only sent when given.

    Returns:
        The authorization URL. No network call is made.
    """
    parameters: Dict[str, Any] = {
        "scope": " ".join(_scope_value(scope) for scope in scopes),
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "response_type": response_type,
        "prompt": prompt,
    }
    if expires_in is not None:
        parameters["expires_in"] = expires_in
    if state is not None:
        parameters["state"] = state

    return f"{authorization_endpoint}?{urlencode(parameters, quote_via=quote, safe='')}"


def token_from_response(response: FitbitResponse) -> BearerToken:
    """Parse a successful token endpoint response into a BearerToken.

    Raises:
        FitbitAPIError: If the response is an error or carries no access token.
    """
    response.raise_for_status()
    try:
        payload = response.json()
    except ValueError as exc:
        raise FitbitAPIError(
            f"Token response is not JSON: {exc}",
            status_code=response.status_code,
            response=response,
        ) from exc

    if not isinstance(payload, dict) or not payload.get("access_token"):
        raise FitbitAPIError(
            "Token response did not contain an access_token",
            status_code=response.status_code,
            response=response,
        )

    try:
        token = BearerToken(**payload)
    except (TypeError, ValueError) as exc:
        raise FitbitAPIError(
            f"Unusable token response: {exc}",
            status_code=response.status_code,
            response=response,
        ) from exc

    logger.info(
        "fitbit_token_parsed",
        token_type=token.token_type,
        scope=token.scope,
        has_refresh_token=bool(token.refresh_token),
    )
    return token
