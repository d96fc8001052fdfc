"""Command-line entry point.

`android-setup -t <project-home> [-v] [-y]` provisions the SDK; `doctor`
reports on the current environment.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from android_setup.adapters.archive import ZipExtractor
from android_setup.adapters.console_prompt import ConsolePromptSource
from android_setup.adapters.http_client import HttpDownloader
from android_setup.adapters.process_runner import SubprocessRunner
from android_setup.cli import doctor
from android_setup.cli.ui_components import build_hooks, print_banner
from android_setup.core.config import AppSettings
from android_setup.core.errors import ProvisioningError
from android_setup.core.services.provisioning_pipeline import ProvisioningPipeline
from android_setup.core.session import ProvisioningSession

app = typer.Typer(
    add_completion=False,
    invoke_without_command=True,
    help="Install the Android SDK, system images and emulators for a test project.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


@app.callback(invoke_without_command=True)
def setup(
    ctx: typer.Context,
    target: Path | None = typer.Option(
        None,
        "--target",
        "-t",
        help="[REQUIRED] The project home directory.",
        file_okay=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print detailed progress."),
    override: bool = typer.Option(
        False,
        "--override",
        "-y",
        help="Always override: accept every default without prompting.",
    ),
) -> None:
    if ctx.invoked_subcommand is not None:
        return
    if target is None:
        raise typer.BadParameter("the project home directory is required", param_hint="'-t' / '--target'")

    print_banner(_console)
    settings = AppSettings()
    session = ProvisioningSession.from_cli(
        target=target,
        verbose=verbose,
        always_override=override,
        settings=settings,
    )
    pipeline = ProvisioningPipeline(
        session,
        settings=settings,
        downloader=HttpDownloader(settings),
        extractor=ZipExtractor(),
        runner=SubprocessRunner(timeout_seconds=settings.process_timeout_seconds),
        prompt_source=ConsolePromptSource(),
        hooks=build_hooks(_console, _err_console),
    )

    try:
        pipeline.run()
    except ProvisioningError as exc:
        _err_console.print(str(exc), style="red", highlight=False, markup=False)
        raise typer.Exit(code=exc.exit_code) from exc


def run() -> None:
    app(prog_name="android-setup")
