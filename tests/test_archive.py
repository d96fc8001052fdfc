"""Tests for ZIP extraction."""

from __future__ import annotations

import os
import sys
import zipfile
from pathlib import Path

import pytest

from android_setup.adapters.archive import ZipExtractor
from android_setup.core.errors import DownloadError

from conftest import write_zip


def test_extracts_files_and_lists_them(tmp_path: Path):
    archive = write_zip(tmp_path / "tools.zip", {"cmdline-tools/bin/sdkmanager": "#!/bin/sh\n", "README": "hi"})
    extracted = ZipExtractor().unzip(archive, tmp_path / "out")
    names = sorted(p.relative_to((tmp_path / "out").resolve()).as_posix() for p in extracted)
    assert names == ["README", "cmdline-tools/bin/sdkmanager"]


@pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX permission bits")
def test_keeps_executable_bit(tmp_path: Path):
    archive = write_zip(
        tmp_path / "tools.zip",
        {"bin/sdkmanager": "#!/bin/sh\n", "lib/data.txt": "x"},
        executable=["bin/sdkmanager"],
    )
    out = tmp_path / "out"
    ZipExtractor().unzip(archive, out)
    assert os.access(out / "bin" / "sdkmanager", os.X_OK)
    assert not os.access(out / "lib" / "data.txt", os.X_OK)


def test_rejects_entries_outside_destination(tmp_path: Path):
    archive = tmp_path / "evil.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("../escape.txt", "nope")
    with pytest.raises(DownloadError, match="escapes destination"):
        ZipExtractor().unzip(archive, tmp_path / "out")
    assert not (tmp_path / "escape.txt").exists()


def test_not_a_zip(tmp_path: Path):
    archive = tmp_path / "fake.zip"
    archive.write_text("<html>login</html>", encoding="utf-8")
    with pytest.raises(DownloadError, match="not a valid ZIP"):
        ZipExtractor().unzip(archive, tmp_path / "out")
