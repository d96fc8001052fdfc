"""Configuration for the setup tool.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking into the CLI.
- Lets adapters (HTTP/process) and the pipeline read one consistent contract.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "android-setup"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "android-setup"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "android-setup"
    return Path.home() / ".config" / "android-setup"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _default_sdk_home() -> Path:
    return Path.home() / ".nexial" / "android" / "sdk"


def _default_avd_home() -> Path:
    override = (os.environ.get("ANDROID_AVD_HOME") or "").strip()
    if override:
        return Path(override)
    return Path.home() / ".android" / "avd"


def _default_cmdline_tools_redirect_url() -> str:
    if sys.platform.startswith("win"):
        os_name = "windows"
    elif sys.platform == "darwin":
        os_name = "mac"
    else:
        os_name = "linux"
    return f"{DISTRO_URL_BASE}/cmdline-tools-{os_name}.txt"


DISTRO_URL_BASE = "https://nexiality.github.io/documentation/assets/android"


class AppSettings(BaseSettings):
    """Central settings of the application.

    Why pydantic-settings:
    - Typed + validated at the edge (env vars) without cluttering the core.
    - One configuration contract shared by the CLI, the adapters and the pipeline.
    """

    model_config = SettingsConfigDict(
        env_prefix="ANDROID_SETUP_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    sdk_home: Path = Field(
        default_factory=_default_sdk_home,
        description="Root directory of the managed Android SDK.",
    )
    avd_home: Path = Field(
        default_factory=_default_avd_home,
        description="Directory where avdmanager writes <id>.avd folders.",
    )
    sdk_rel_path: str = Field(
        default=".nexial/android/sdk",
        min_length=1,
        description="SDK path relative to the user home, baked into generated scripts.",
    )

    cmdline_tools_redirect_url: str = Field(
        default_factory=_default_cmdline_tools_redirect_url,
        min_length=8,
        description="URL whose body is the actual command-line-tools archive URL.",
    )
    license_zip_url: str = Field(
        default=f"{DISTRO_URL_BASE}/android_sdk_license.zip",
        min_length=8,
        description="Archive of pre-accepted SDK license agreements.",
    )
    skins_zip_url: str = Field(
        default=f"{DISTRO_URL_BASE}/android_skins.zip",
        min_length=8,
        description="Archive of pre-packaged emulator skins.",
    )
    emulators_url: str = Field(
        default=f"{DISTRO_URL_BASE}/android_emulators.json",
        min_length=8,
        description="JSON document describing the available emulator vendors/products.",
    )

    http_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout per HTTP request (seconds).",
    )
    download_retries: int = Field(
        default=1,
        ge=0,
        le=5,
        description="Retries for idempotent downloads on transport errors or 5xx responses.",
    )
    process_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Timeout for external tool invocations (None = wait forever).",
    )
    user_agent: str = Field(
        default="android-setup/0.1",
        min_length=1,
        description="User-Agent for downloads.",
    )

    default_avd: str = Field(
        default="Pixel_04a",
        min_length=1,
        description="Emulator id installed in always-override mode.",
    )
    default_system_image_64: str = Field(
        default="system-images;android-30;google_apis;x86_64",
        min_length=1,
    )
    default_system_image_32: str = Field(
        default="system-images;android-30;google_apis;x86",
        min_length=1,
    )
    avd_ram_size: int = Field(
        default=1536,
        ge=256,
        description="hw.ramSize written into every generated AVD (MB).",
    )
    avd_lcd_density: int = Field(
        default=480,
        ge=120,
        le=640,
        description="hw.lcd.density written into every generated AVD.",
    )
