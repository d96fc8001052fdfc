"""Download and archive contracts."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from android_setup.core.domain.models import HttpResult


@runtime_checkable
class Downloader(Protocol):
    """Quiet HTTP client that reports the status line instead of raising."""

    def get(self, url: str) -> HttpResult:
        """Fetch `url` and return its body as text."""

        ...

    def download(self, url: str, destination: Path) -> HttpResult:
        """Stream `url` into `destination`; `payload_location` points at the file."""

        ...


@runtime_checkable
class ArchiveExtractor(Protocol):
    def unzip(self, archive: Path, destination: Path) -> list[Path]:
        ...
