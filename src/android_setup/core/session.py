"""Per-run provisioning state.

Replaces process-wide flags: the session is built once from the CLI flags and
passed to every component that needs it.
"""

from __future__ import annotations

import platform
import struct
from dataclasses import dataclass, replace
from pathlib import Path

from android_setup.core.config import AppSettings


def host_arch_bits() -> int:
    """64 on a 64-bit host, 32 otherwise."""

    machine = platform.machine().lower()
    if machine.endswith("64") or machine in ("amd64", "x86_64", "arm64", "aarch64"):
        return 64
    return struct.calcsize("P") * 8


@dataclass(frozen=True)
class ProvisioningSession:
    """Parameters of one setup run. Read-only; a downgrade yields a new session."""

    project_home: Path
    verbose: bool = False
    always_override: bool = False
    default_avd_name: str = "Pixel_04a"
    default_system_image: str = ""

    @classmethod
    def from_cli(
        cls,
        *,
        target: str | Path,
        verbose: bool,
        always_override: bool,
        settings: AppSettings,
        arch_bits: int | None = None,
    ) -> "ProvisioningSession":
        bits = arch_bits if arch_bits is not None else host_arch_bits()
        default_image = settings.default_system_image_64 if bits == 64 else settings.default_system_image_32
        return cls(
            project_home=Path(target).expanduser().resolve(),
            verbose=verbose,
            always_override=always_override,
            default_avd_name=settings.default_avd,
            default_system_image=default_image,
        )

    @property
    def bin_dir(self) -> Path:
        return self.project_home / "artifact" / "bin"

    def downgrade_system_image(self, fallback: str) -> "ProvisioningSession":
        """Copy with `fallback` as the default image (64-bit image not offered)."""

        return replace(self, default_system_image=fallback)
