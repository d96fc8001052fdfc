"""Shared test fixtures: fake collaborators and a temporary SDK layout."""

from __future__ import annotations

import json
import zipfile
from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

from android_setup.core.config import AppSettings
from android_setup.core.domain.models import HttpResult, ProcessOutcome
from android_setup.core.sdk_layout import SdkLayout

REDIRECT_URL = "https://dl.test/cmdline-tools-linux.txt"
CMDLINE_TOOLS_URL = "https://dl.test/commandlinetools-linux_latest.zip"
LICENSE_URL = "https://dl.test/android_sdk_license.zip"
SKINS_URL = "https://dl.test/android_skins.zip"
EMULATORS_URL = "https://dl.test/android_emulators.json"

SYS_IMG_64 = "system-images;android-30;google_apis;x86_64"
SYS_IMG_32 = "system-images;android-30;google_apis;x86"

AVAILABLE_LISTING = f"""Installed packages:
  Path                 | Version | Description
  -------              | ------- | -------
  platform-tools       | 34.0.5  | Android SDK Platform-Tools

Available Packages:
  Path                                          | Version | Description
  -------                                       | ------- | -------
  system-images;android-29;default;x86_64       | 8       | Intel x86 Atom_64 System Image
  {SYS_IMG_64} | 10      | Google APIs Intel x86 Atom_64 System Image
  {SYS_IMG_32}    | 10      | Google APIs Intel x86 Atom System Image
"""

EMULATOR_CATALOG = {
    "vendors": [
        {
            "name": "Google",
            "products": [
                {
                    "id": "Pixel_04a",
                    "name": "Pixel 4a",
                    "display": '5.81"',
                    "resolution": "1080x2340",
                    "skin": "pixel_4a",
                },
                {
                    "id": "Pixel_05",
                    "name": "Pixel 5",
                    "display": '6.0"',
                    "resolution": "1080x2340",
                    "skin": "pixel_5",
                },
            ],
        },
        {
            "name": "Samsung",
            "products": [
                {
                    "id": "Galaxy_S10",
                    "name": "Galaxy S10",
                    "display": '6.1"',
                    "resolution": "1440x3040",
                    "skin": "galaxy_s10",
                }
            ],
        },
    ]
}


def write_zip(path: Path, entries: dict[str, str], *, executable: Iterable[str] = ()) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    exec_entries = set(executable)
    with zipfile.ZipFile(path, "w") as zf:
        for name, content in entries.items():
            info = zipfile.ZipInfo(name)
            mode = 0o755 if name in exec_entries else 0o644
            info.external_attr = (0o100000 | mode) << 16
            zf.writestr(info, content)
    return path


class FakeDownloader:
    """Serves canned responses; `download` writes ZIPs built from `archives`."""

    def __init__(
        self,
        *,
        pages: dict[str, HttpResult] | None = None,
        archives: dict[str, dict[str, str]] | None = None,
        failures: dict[str, HttpResult] | None = None,
    ) -> None:
        self.pages = pages or {}
        self.archives = archives or {}
        self.failures = failures or {}
        self.calls: list[tuple[str, str]] = []

    def get(self, url: str) -> HttpResult:
        self.calls.append(("get", url))
        if url in self.pages:
            return self.pages[url]
        return HttpResult(return_code=404, status_text="Not Found", body=f"no such page: {url}")

    def download(self, url: str, destination: Path) -> HttpResult:
        self.calls.append(("download", url))
        if url in self.failures:
            return self.failures[url]
        if url not in self.archives:
            return HttpResult(return_code=404, status_text="Not Found", body=f"no such archive: {url}")
        write_zip(destination, self.archives[url], executable=self.archives[url].keys())
        return HttpResult(return_code=200, status_text="OK", payload_location=destination)


class FakeRunner:
    """Records invocations; `handler` decides the outcome of each call."""

    def __init__(self, handler: Callable[..., ProcessOutcome] | None = None) -> None:
        self.handler = handler
        self.calls: list[dict[str, object]] = []

    def invoke(self, executable, args, env=None, *, cwd=None, input_text=None) -> ProcessOutcome:
        call = {
            "executable": Path(executable),
            "args": list(args),
            "env": dict(env or {}),
            "cwd": cwd,
            "input_text": input_text,
        }
        self.calls.append(call)
        if self.handler is None:
            return ProcessOutcome()
        return self.handler(**call)


class ScriptedPrompt:
    """Answers prompts from a fixed list; fails the test when it runs dry."""

    def __init__(self, answers: Iterable[str] = ()) -> None:
        self.answers = list(answers)
        self.messages: list[str] = []

    def read(self, message: str) -> str:
        self.messages.append(message)
        if not self.answers:
            raise AssertionError(f"unexpected prompt: {message}")
        return self.answers.pop(0)


class RecordingHooks:
    def __init__(self) -> None:
        self.logs: list[str] = []
        self.verbose: list[str] = []
        self.errors: list[str] = []

    def build(self):
        from android_setup.core.services.provisioning_pipeline import ProvisioningHooks

        return ProvisioningHooks(log=self.logs.append, verbose=self.verbose.append, error=self.errors.append)


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    return AppSettings(
        _env_file=None,
        sdk_home=tmp_path / "sdk",
        avd_home=tmp_path / "avd",
        cmdline_tools_redirect_url=REDIRECT_URL,
        license_zip_url=LICENSE_URL,
        skins_zip_url=SKINS_URL,
        emulators_url=EMULATORS_URL,
    )


@pytest.fixture
def layout(settings: AppSettings) -> SdkLayout:
    return SdkLayout.from_settings(settings, windows=False)


@pytest.fixture
def downloader() -> FakeDownloader:
    return FakeDownloader(
        pages={
            REDIRECT_URL: HttpResult(return_code=200, status_text="OK", body=f"  {CMDLINE_TOOLS_URL}\n"),
            EMULATORS_URL: HttpResult(return_code=200, status_text="OK", body=json.dumps(EMULATOR_CATALOG)),
        },
        archives={
            CMDLINE_TOOLS_URL: {
                "cmdline-tools/bin/sdkmanager": "#!/bin/sh\n",
                "cmdline-tools/bin/avdmanager": "#!/bin/sh\n",
                "cmdline-tools/lib/sdkmanager-classpath.jar": "jar",
            },
            LICENSE_URL: {"android-sdk-license": "24333f8a63b6825ea9c5514f83c2829b004d1fee\n"},
            SKINS_URL: {"pixel_4a/layout": "parts {}\n", "pixel_5/layout": "parts {}\n"},
        },
    )


def make_sdk_handler(layout: SdkLayout, *, installed: Iterable[str] = (SYS_IMG_64,)):
    """Behaves like sdkmanager/avdmanager: installs files, lists packages, creates AVDs."""

    installed_listing = "Installed packages:\n" + "".join(f"  {image} | 10 | image\n" for image in installed)

    def handler(executable: Path, args: list[str], **_: object) -> ProcessOutcome:
        if executable.name.startswith("avdmanager"):
            avd_id = args[args.index("-n") + 1]
            config = layout.avd_config(avd_id)
            config.parent.mkdir(parents=True, exist_ok=True)
            config.write_text(
                "AvdId=" + avd_id + "\nhw.ramSize=512\nhw.lcd.density=320\nhw.keyboard=no\nimage.sysdir.1=x\n",
                encoding="utf-8",
            )
            return ProcessOutcome(stdout="Do you wish to create a custom hardware profile? [no]", return_code=0)
        if "--list" in args:
            return ProcessOutcome(stdout=AVAILABLE_LISTING, return_code=0)
        if "--list_installed" in args:
            return ProcessOutcome(stdout=installed_listing, return_code=0)
        if "build-tools;30.0.3" in args:
            signer = layout.build_tools_dir / "30.0.3" / "lib" / "apksigner.jar"
            signer.parent.mkdir(parents=True, exist_ok=True)
            signer.write_bytes(b"PK")
        return ProcessOutcome(stdout="[=======================================] 100% done", return_code=0)

    return handler
