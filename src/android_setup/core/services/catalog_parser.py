"""Parsing of `sdkmanager --list` / `--list_installed` output."""

from __future__ import annotations

from android_setup.core.domain.models import SdkPackage


def parse_package_catalog(text: str, prefix: str) -> list[str]:
    """Return the sorted ids of every line whose trimmed text starts with `prefix`.

    The id is the trimmed line up to its first space. Lines that do not match
    are dropped; duplicates already present in `text` are kept.
    """

    ids: list[str] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line.startswith(prefix):
            continue
        ids.append(line.split(" ", 1)[0])
    return sorted(ids)


def parse_sdk_packages(text: str, prefix: str) -> list[SdkPackage]:
    return [SdkPackage(id=package_id) for package_id in parse_package_catalog(text, prefix)]
