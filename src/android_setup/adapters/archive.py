"""ZIP extraction.

The SDK archives ship shell scripts (`sdkmanager`, `avdmanager`) whose
executable bit lives in the entry's external attributes; `zipfile` drops it,
so it is restored after each member is written.
"""

from __future__ import annotations

import zipfile
from pathlib import Path

from android_setup.core.errors import DownloadError


class ZipExtractor:
    """`ArchiveExtractor` built on `zipfile`."""

    def unzip(self, archive: Path, destination: Path) -> list[Path]:
        destination.mkdir(parents=True, exist_ok=True)
        root = destination.resolve()
        extracted: list[Path] = []
        try:
            with zipfile.ZipFile(archive) as zf:
                for info in zf.infolist():
                    target = (destination / info.filename).resolve()
                    if root != target and root not in target.parents:
                        raise DownloadError(f"ERROR: Archive entry escapes destination: {info.filename}")
                    zf.extract(info, destination)
                    mode = (info.external_attr >> 16) & 0o777
                    if mode and not info.is_dir():
                        target.chmod(mode)
                    if not info.is_dir():
                        extracted.append(target)
        except zipfile.BadZipFile as exc:
            raise DownloadError(f"ERROR: {archive} is not a valid ZIP file", detail=str(exc)) from exc
        return extracted
