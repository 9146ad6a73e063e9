from __future__ import annotations

from time import sleep as _sleep
from typing import Callable, Literal

import httpx

from build_trigger.retry import DEFAULT_RETRY_SECONDS, run_until_success

RETRYABLE_STATUS_CODES = frozenset({502, 503, 504})

# Connection-level failures only; UnsupportedProtocol and friends mean bad configuration.
RETRYABLE_TRANSPORT_ERRORS = (httpx.NetworkError, httpx.TimeoutException, httpx.RemoteProtocolError)

Method = Literal["GET", "POST"]


class TransientRequestError(RuntimeError):
    pass


class JenkinsRequestClient:
    def __init__(
        self,
        *,
        username: str,
        password: str,
        verify_tls: bool = False,
        timeout_seconds: float = 30.0,
        retry_seconds: float = DEFAULT_RETRY_SECONDS,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = _sleep,
    ) -> None:
        self._auth = httpx.BasicAuth(username, password)
        self._verify_tls = verify_tls
        self._timeout_seconds = timeout_seconds
        self._retry_seconds = retry_seconds
        self._transport = transport
        self._sleep = sleep

    def request(self, method: Method, url: str, label: str) -> httpx.Response:
        """Send one request, retrying gateway errors and dropped connections forever.

        Any other status is handed back untouched for the caller to judge.
        """
        return run_until_success(
            label,
            lambda: self._send_once(method, url),
            retry_on=(TransientRequestError,),
            interval_seconds=self._retry_seconds,
            sleep=self._sleep,
        )

    def _send_once(self, method: Method, url: str) -> httpx.Response:
        # A new client per call so no connection outlives a single request.
        try:
            with httpx.Client(
                auth=self._auth,
                verify=self._verify_tls,
                timeout=self._timeout_seconds,
                transport=self._transport,
            ) as client:
                response = client.request(method, url)
        except RETRYABLE_TRANSPORT_ERRORS as exc:
            raise TransientRequestError(f"{method} {url} failed: {exc!r}") from exc

        if response.status_code in RETRYABLE_STATUS_CODES:
            raise TransientRequestError(
                f"{method} {url} returned {response.status_code} {response.reason_phrase}"
            )
        return response
