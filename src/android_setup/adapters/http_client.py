"""httpx wrapper used for every remote resource.

Why a wrapper:
- Standardizes timeouts, headers and the single bounded retry.
- Reports the status line instead of raising, so the pipeline decides what is fatal.
- Quiet and isolated: `trust_env=False` ignores proxy/netrc settings from the environment.
- Easy to test: `transport` accepts an `httpx.MockTransport`.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable

import httpx

from android_setup.core.config import AppSettings
from android_setup.core.domain.models import HttpResult
from android_setup.core.errors import DownloadError


def build_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Creates an `httpx.Client` with the tool's defaults."""

    settings = settings or AppSettings()
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        trust_env=False,
        headers={"User-Agent": settings.user_agent},
        transport=transport,
    )


class HttpDownloader:
    """`Downloader` backed by a synchronous httpx client."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
        retry_delay_seconds: float = 1.0,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport
        self._retry_delay = retry_delay_seconds

    def get(self, url: str) -> HttpResult:
        def _attempt(client: httpx.Client) -> HttpResult:
            response = client.get(url)
            return HttpResult(
                return_code=response.status_code,
                status_text=response.reason_phrase,
                body=response.text,
            )

        return self._with_retry(url, _attempt)

    def download(self, url: str, destination: Path) -> HttpResult:
        def _attempt(client: httpx.Client) -> HttpResult:
            with client.stream("GET", url) as response:
                if response.status_code != 200:
                    response.read()
                    return HttpResult(
                        return_code=response.status_code,
                        status_text=response.reason_phrase,
                        body=response.text,
                    )
                destination.parent.mkdir(parents=True, exist_ok=True)
                with destination.open("wb") as fh:
                    for chunk in response.iter_bytes():
                        fh.write(chunk)
                return HttpResult(
                    return_code=response.status_code,
                    status_text=response.reason_phrase,
                    payload_location=destination,
                )

        return self._with_retry(url, _attempt)

    def _with_retry(self, url: str, attempt_fn: Callable[[httpx.Client], HttpResult]) -> HttpResult:
        retries = self._settings.download_retries
        with build_client(self._settings, transport=self._transport) as client:
            for attempt in range(retries + 1):
                try:
                    result = attempt_fn(client)
                except httpx.TransportError as exc:
                    if attempt >= retries:
                        raise DownloadError(f"ERROR: Unable to read from {url}: {exc}") from exc
                else:
                    if result.return_code < 500 or attempt >= retries:
                        return result
                time.sleep(self._retry_delay)
        raise DownloadError(f"ERROR: Unable to read from {url}")  # pragma: no cover
