"""Doctor command for environment diagnostics."""

from __future__ import annotations

import shutil

import typer
from rich.console import Console
from rich.table import Table

from android_setup.adapters.http_client import HttpDownloader
from android_setup.adapters.process_runner import SubprocessRunner
from android_setup.core.config import AppSettings
from android_setup.core.domain.models import ProcessOutcome
from android_setup.core.errors import DownloadError, ProvisioningError
from android_setup.core.sdk_layout import SYSTEM_IMAGES_PREFIX, SdkLayout
from android_setup.core.services.catalog_parser import parse_sdk_packages

app = typer.Typer(no_args_is_help=False, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_http(downloader: HttpDownloader, url: str) -> tuple[bool, str]:
    try:
        response = downloader.get(url)
    except DownloadError as exc:
        return False, exc.message
    return response.ok, f"HTTP {response.return_code} {response.status_text}".strip()


def _add_installed_images_row(table: Table, outcome: ProcessOutcome) -> None:
    if outcome.failed:
        table.add_row("System images", "FAIL", outcome.stderr.strip().splitlines()[0])
        return
    images = parse_sdk_packages(outcome.stdout, SYSTEM_IMAGES_PREFIX)
    table.add_row("System images", "OK" if images else "NONE", "\n".join(str(i) for i in images))


@app.callback(invoke_without_command=True)
def run() -> None:
    """Run baseline diagnostics and show what the setup would use."""

    settings = AppSettings()
    layout = SdkLayout.from_settings(settings)

    table = Table(title="Android Setup Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("SDK home", "OK" if layout.sdk_home.is_dir() else "MISSING", str(layout.sdk_home))
    table.add_row("AVD home", "OK" if layout.avd_home.is_dir() else "MISSING", str(layout.avd_home))
    for label, tool in (
        ("sdkmanager", layout.sdk_manager),
        ("avdmanager", layout.avd_manager),
        ("emulator", layout.emulator),
    ):
        table.add_row(label, "OK" if tool.is_file() else "MISSING", str(tool))

    java = shutil.which("java")
    table.add_row("java", "OK" if java else "MISSING", java or "sdkmanager/avdmanager need a JRE on PATH")

    if layout.sdk_manager.is_file():
        runner = SubprocessRunner(timeout_seconds=settings.process_timeout_seconds)
        try:
            outcome = runner.invoke(
                layout.sdk_manager,
                [layout.sdk_root_option(), "--list_installed"],
                layout.tool_env(),
                cwd=layout.sdk_manager.parent,
            )
        except ProvisioningError as exc:
            table.add_row("System images", "FAIL", exc.message)
        else:
            _add_installed_images_row(table, outcome)

    # Connectivity (best-effort)
    ok_http, detail_http = _check_http(HttpDownloader(settings), settings.emulators_url)
    table.add_row("Emulator catalog", "OK" if ok_http else "FAIL", f"{detail_http} ({settings.emulators_url})")

    _console.print(table)
