"""CLI UI components (Rich).

Why separate components:
- Keeps command logic free of visual details.
- The pipeline hooks are built here, so the core never prints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from android_setup.adapters.script_exporter import GENERATOR_SIGNATURE
from android_setup.core.domain.models import EmulatorCatalog
from android_setup.core.services.provisioning_pipeline import ProvisioningHooks


def print_banner(console: Console) -> None:
    title = Text(GENERATOR_SIGNATURE, style="bold cyan")
    subtitle = Text("Android SDK • System images • Emulators", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def log_line(console: Console, message: str) -> None:
    """Prints `message` with a time prefix; blank lines stay blank."""

    for line in message.split("\n"):
        if not line.strip():
            console.print(line)
        else:
            stamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
            console.print(Text.assemble((stamp, "dim"), f" >> {line}"), highlight=False)


def build_system_images_table(images: Sequence[str], *, title: str = "Available System Images") -> Table:
    table = Table(title=title, show_header=False)
    table.add_column("Package", style="cyan")
    for image in images:
        table.add_row(image)
    return table


def build_emulator_tables(catalog: EmulatorCatalog) -> list[Table]:
    """One table per vendor, vendors and products sorted."""

    tables: list[Table] = []
    for vendor in sorted(catalog.vendors, key=lambda v: v.name):
        table = Table(title=vendor.name, title_style="bold")
        table.add_column("id", style="bright_green", no_wrap=True)
        table.add_column("name", style="white")
        table.add_column("display", style="dim")
        table.add_column("resolution", style="magenta")
        for product in sorted(vendor.products, key=lambda p: p.id):
            table.add_row(product.id, product.name, product.display, product.resolution)
        tables.append(table)
    return tables


def build_hooks(console: Console, err_console: Console) -> ProvisioningHooks:
    """Wires pipeline callbacks to the terminal."""

    def _show_emulators(catalog: EmulatorCatalog) -> None:
        for table in build_emulator_tables(catalog):
            console.print(table)

    return ProvisioningHooks(
        log=lambda message: log_line(console, message),
        verbose=lambda message: log_line(console, message),
        error=lambda message: err_console.print(message, style="red", markup=False, highlight=False),
        show_system_images=lambda images: console.print(build_system_images_table(images)),
        show_emulators=_show_emulators,
        show_installed_images=lambda images: console.print(
            build_system_images_table(images, title="Installed System Images")
        ),
    )
