from __future__ import annotations

from dataclasses import dataclass

import requests
from requests import exceptions as req_exc


class FetchError(RuntimeError):
    """A single GET failed at the transport level or returned a non-2xx status."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


@dataclass(frozen=True)
class FetchResult:
    url: str
    text: str


class HttpClient:
    """Thin wrapper over a ``requests.Session``.

    One attempt per call; there is no retry or backoff. Timeouts are left to
    the transport (``timeout_s`` is handed straight to ``requests``).
    """

    def __init__(
        self,
        session: requests.Session,
        *,
        timeout_s: int = 45,
    ) -> None:
        self._session = session
        self._timeout_s = timeout_s

    def get(self, url: str) -> FetchResult:
        try:
            resp = self._session.get(url, timeout=self._timeout_s)
        except req_exc.RequestException as e:
            raise FetchError(url, str(e)) from e

        if not 200 <= int(resp.status_code) < 300:
            reason = f"HTTP {resp.status_code}"
            if resp.reason:
                reason = f"{reason} {resp.reason}"
            raise FetchError(url, reason)

        return FetchResult(url=url, text=resp.text)


def fetch_page(http: HttpClient, url: str) -> str:
    return http.get(url).text
