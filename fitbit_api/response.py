"""Typed wrapper around raw Fitbit HTTP responses."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping, Optional

from requests.structures import CaseInsensitiveDict
from requests.utils import guess_json_utf

if TYPE_CHECKING:
    import requests


class FitbitAPIError(RuntimeError):
    """Raised when a caller asks for a failed Fitbit response to be treated as an error."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        response: Optional["FitbitResponse"] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class FitbitConfigError(FitbitAPIError):
    """Raised when client configuration is missing or unusable."""


@dataclass(frozen=True)
class FitbitResponse:
    """Status, headers and body of a Fitbit API response, uninterpreted."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=CaseInsensitiveDict)
    content: bytes = b""
    url: str = ""
    encoding: Optional[str] = None
    apparent_encoding: Optional[str] = None

    @classmethod
    def from_requests(
        cls, response: "requests.Response", *, url: Optional[str] = None
    ) -> "FitbitResponse":
        """Capture a transport response without inspecting its status."""
        return cls(
            status_code=response.status_code,
            headers=CaseInsensitiveDict(response.headers),
            content=response.content,
            url=url if url is not None else response.url,
            encoding=response.encoding,
            apparent_encoding=response.apparent_encoding,
        )

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    @property
    def text(self) -> str:
        encoding = self.encoding or self.apparent_encoding or "utf-8"
        return self.content.decode(encoding, errors="replace")

    def json(self) -> Any:
        # Same detection as requests.Response.json when no charset was declared
        if not self.encoding and self.content:
            encoding = guess_json_utf(self.content)
            if encoding is not None:
                return json.loads(self.content.decode(encoding))
        return json.loads(self.text)

    def raise_for_status(self) -> "FitbitResponse":
        """Raise FitbitAPIError for 4xx/5xx responses, otherwise return self."""
        if not self.ok:
            raise FitbitAPIError(
                f"Fitbit API call failed with {self.status_code}: {self.text}",
                status_code=self.status_code,
                response=self,
            )
        return self
