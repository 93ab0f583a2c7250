"""Fitbit API client: token exchange and authorized resource requests."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Union

import requests
import structlog
from requests_oauth2client import BearerToken

from .auth import ScopeLike, build_login_url
from .config import ClientCredentials, FitbitEndpoints
from .response import FitbitResponse

logger = structlog.get_logger(__name__)



class HttpMethod(str, Enum):
    """HTTP methods supported by :meth:`FitbitAPIClient.send`."""

    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"

    @classmethod
    def coerce(cls, method: Union["HttpMethod", str]) -> "HttpMethod":
        """Accept a member or a case-insensitive method name."""
        if isinstance(method, cls):
            return method
        try:
            return cls(str(method).upper())
        except ValueError:
            raise ValueError(f"Unsupported HTTP method: {method!r}") from None


class FitbitAPIClient:
    """Builds Fitbit OAuth and API requests and hands them to a requests session.

    Responses are returned as :class:`FitbitResponse` whatever their status;
    interpreting 4xx/5xx is left to the caller. The token and custom headers
    are plain mutable fields, so use one client per logical session.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        *,
        session: Optional[requests.Session] = None,
        endpoints: Optional[FitbitEndpoints] = None,
    ) -> None:
        self.credentials = ClientCredentials(client_id, client_secret)
        self.session = session or requests.Session()
        self.endpoints = endpoints or FitbitEndpoints()
        self._token: Optional[str] = None
        self._headers: Dict[str, str] = {}

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, **kwargs: Any
    ) -> "FitbitAPIClient":
        """Create a client from ``FB_CLIENT_ID`` / ``FB_CLIENT_SECRET``."""
        credentials = ClientCredentials.from_env(environ)
        return cls(credentials.client_id, credentials.client_secret, **kwargs)

    @property
    def client_id(self) -> str:
        return self.credentials.client_id

    # -- OAuth -------------------------------------------------------------

    def build_login_url(
        self,
        redirect_uri: str,
        scopes: Iterable[ScopeLike],
        response_type: str = "code",
        expires_in: Optional[int] = None,
        prompt: str = "none",
        state: Optional[str] = None,
    ) -> str:
        """Return the authorization page URL for this application."""
        return build_login_url(
            self.endpoints.authorization_endpoint,
            self.credentials.client_id,
            redirect_uri,
            scopes,
            response_type=response_type,
            expires_in=expires_in,
            prompt=prompt,
            state=state,
        )

    def exchange_authorization_code(
        self,
        code: str,
        redirect_uri: str,
        expires_in: Optional[int] = None,
        state: Optional[str] = None,
    ) -> FitbitResponse:
        """Exchange an authorization code for an access token."""
        parameters: Dict[str, Any] = {
            "code": code,
            "grant_type": "authorization_code",
            "client_id": self.credentials.client_id,
            "redirect_uri": redirect_uri,
        }
        if expires_in is not None:
            parameters["expires_in"] = expires_in
        if state is not None:
            parameters["state"] = state
        return self._token_request(self.endpoints.token_endpoint, parameters)

    def refresh_token(
        self, refresh_token: str, expires_in: Optional[int] = None
    ) -> FitbitResponse:
        """Trade a refresh token for a new access token."""
        parameters: Dict[str, Any] = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        }
        if expires_in is not None:
            parameters["expires_in"] = expires_in
        return self._token_request(self.endpoints.token_endpoint, parameters)

    def revoke_token(self, token: str) -> FitbitResponse:
        """Revoke an access or refresh token."""
        return self._token_request(self.endpoints.revocation_endpoint, {"token": token})

    def _token_request(self, url: str, parameters: Dict[str, Any]) -> FitbitResponse:
        headers = {"Content-Type": "application/x-www-form-urlencoded"}
        auth = requests.auth.HTTPBasicAuth(
            self.credentials.client_id, self.credentials.client_secret
        )
        logger.debug(
            "fitbit_token_request",
            url=url,
            grant_type=parameters.get("grant_type"),
            client_id=self.credentials.masked_client_id(),
        )
        response = self.session.request(
            "POST", url, params=parameters, headers=headers, auth=auth
        )
        result = FitbitResponse.from_requests(response, url=url)
        logger.debug("fitbit_token_response", url=url, status=result.status_code)
        return result

    # -- Session state -----------------------------------------------------

    def set_token(self, token: Union[str, BearerToken, None]) -> "FitbitAPIClient":
        """Set the bearer token used on resource requests."""
        if isinstance(token, BearerToken):
            token = token.access_token
        self._token = token
        return self

    def get_token(self) -> Optional[str]:
        return self._token

    def set_headers(self, headers: Mapping[str, str]) -> "FitbitAPIClient":
        """Replace the custom headers sent with every resource request."""
        self._headers = dict(headers)
        return self

    def get_headers(self) -> Dict[str, str]:
        return dict(self._headers)

    # -- Resource API ------------------------------------------------------

    def get(
        self, namespace: str, user: str = "-", file_ext: str = ".json"
    ) -> FitbitResponse:
        return self.send(namespace, HttpMethod.GET, user=user, file_ext=file_ext)

    def post(
        self, namespace: str, data: Optional[Mapping[str, Any]], user: str = "-"
    ) -> FitbitResponse:
        return self.send(namespace, HttpMethod.POST, data, user=user)

    def delete(self, namespace: str, user: str = "") -> FitbitResponse:
        return self.send(namespace, HttpMethod.DELETE, user=user)

    def resource_url(self, namespace: str, user: str = "-", file_ext: str = ".json") -> str:
        """Return ``{api_base}1/[user/{user}/]{namespace}{file_ext}``."""
        user_segment = f"user/{user}/" if user else ""
        return f"{self.endpoints.api_base}1/{user_segment}{namespace}{file_ext}"

    def send(
        self,
        namespace: str,
        method: Union[HttpMethod, str] = HttpMethod.GET,
        data: Optional[Mapping[str, Any]] = None,
        user: str = "-",
        file_ext: str = ".json",
    ) -> FitbitResponse:
        """Send an authorized request to the Fitbit API.

        Custom headers override the ``Authorization`` header on collision.
        ``data`` is form-encoded into the body for POST and ignored otherwise.
        Non-2xx responses are returned, not raised.
        """
        http_method = HttpMethod.coerce(method)
        url = self.resource_url(namespace, user=user, file_ext=file_ext)

        headers = {"Authorization": f"Bearer {self._token or ''}"}
        headers.update(self._headers)

        kwargs: Dict[str, Any] = {"headers": headers}
        if http_method is HttpMethod.POST:
            kwargs["data"] = dict(data or {})

        logger.debug("fitbit_api_request", method=http_method.value, url=url)
        response = self.session.request(http_method.value, url, **kwargs)
        result = FitbitResponse.from_requests(response, url=url)
        logger.debug(
            "fitbit_api_response",
            method=http_method.value,
            url=url,
            status=result.status_code,
        )
        return result
