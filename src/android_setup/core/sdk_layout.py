"""Paths inside the managed Android SDK.

Everything the pipeline touches on disk is derived here from `AppSettings`,
so tests can point the whole layout at a temporary directory.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

from android_setup.core.config import AppSettings

SYSTEM_IMAGES_PREFIX = "system-images;"
APK_SIGNER_FILE = "apksigner.jar"

COMMON_PACKAGES: tuple[str, ...] = (
    "extras;google;usb_driver",
    "extras;google;webdriver",
    "platform-tools",
    "emulator",
    "cmdline-tools;latest",
    "extras;intel;Hardware_Accelerated_Execution_Manager",
    "extras;google;Android_Emulator_Hypervisor_Driver",
    "platforms;android-30",
    "build-tools;30.0.3",
)


def is_windows() -> bool:
    return sys.platform.startswith("win")


@dataclass(frozen=True)
class SdkLayout:
    sdk_home: Path
    avd_home: Path
    sdk_rel_path: str
    windows: bool = False

    @classmethod
    def from_settings(cls, settings: AppSettings, *, windows: bool | None = None) -> "SdkLayout":
        return cls(
            sdk_home=settings.sdk_home.expanduser(),
            avd_home=settings.avd_home.expanduser(),
            sdk_rel_path=settings.sdk_rel_path,
            windows=is_windows() if windows is None else windows,
        )

    @property
    def script_ext(self) -> str:
        return ".cmd" if self.windows else ".sh"

    @property
    def _tool_ext(self) -> str:
        return ".bat" if self.windows else ""

    @property
    def cmdline_tools_dir(self) -> Path:
        return self.sdk_home / "cmdline-tools"

    @property
    def sdk_manager_rel_path(self) -> str:
        return f"cmdline-tools/bin/sdkmanager{self._tool_ext}"

    @property
    def avd_manager_rel_path(self) -> str:
        return f"cmdline-tools/bin/avdmanager{self._tool_ext}"

    @property
    def sdk_manager(self) -> Path:
        return self.sdk_home / self.sdk_manager_rel_path

    @property
    def avd_manager(self) -> Path:
        return self.sdk_home / self.avd_manager_rel_path

    @property
    def emulator(self) -> Path:
        return self.sdk_home / "emulator" / f"emulator{'.exe' if self.windows else ''}"

    @property
    def license_dir(self) -> Path:
        return self.sdk_home / "licenses"

    @property
    def skins_dir(self) -> Path:
        return self.sdk_home / "skins"

    @property
    def build_tools_dir(self) -> Path:
        return self.sdk_home / "build-tools"

    @property
    def apk_signer_dest(self) -> Path:
        return self.sdk_home / "tools" / "lib" / APK_SIGNER_FILE

    def avd_config(self, avd_id: str) -> Path:
        return self.avd_home / f"{avd_id}.avd" / "config.ini"

    def sdk_root_option(self) -> str:
        return f"--sdk_root={self.sdk_home}"

    def tool_env(self) -> dict[str, str]:
        """Environment overrides handed to sdkmanager/avdmanager."""

        return {
            "ANDROID_SDK_ROOT": str(self.sdk_home),
            "ANDROID_HOME": str(self.sdk_home),
            "ANDROID_AVD_HOME": str(self.avd_home),
        }
