"""Rewrites a generated AVD `config.ini` into the device profile the platform expects."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from android_setup.core.domain.models import EmulatorProduct

DENIED_KEYS: tuple[str, ...] = (
    "hw.dPad",
    "hw.gpu.enabled",
    "hw.keyboard",
    "hw.lcd.density",
    "hw.lcd.height",
    "hw.lcd.width",
    "hw.mainKeys",
    "hw.ramSize",
    "hw.trackBall",
    "skin.dynamic",
    "skin.name",
    "skin.path",
)

# 120, 140, 160, 180, 213, 240, 280, 320, 340, 360, 400, 420, 440, 480, 560, 640
DEFAULT_LCD_DENSITY = 480
DEFAULT_RAM_SIZE = 1536


def build_overrides(
    product: EmulatorProduct,
    *,
    skins_dir: Path,
    ram_size: int = DEFAULT_RAM_SIZE,
    lcd_density: int = DEFAULT_LCD_DENSITY,
) -> list[str]:
    """Device-specific `key=value` lines appended to the config."""

    return [
        "hw.dPad=no",
        "hw.gpu.enabled=yes",
        "hw.keyboard=yes",
        "hw.mainKeys=no",
        "hw.trackBall=no",
        "skin.dynamic=yes",
        f"hw.lcd.density={lcd_density}",
        f"hw.lcd.height={product.height}",
        f"hw.lcd.width={product.width}",
        f"hw.ramSize={ram_size}",
        f"skin.name={product.skin}",
        f"skin.path={skins_dir / product.skin}",
    ]


def config_key(line: str) -> str:
    return line.split("=", 1)[0].strip()


def patch_config_lines(
    lines: Iterable[str],
    *,
    denied_keys: Iterable[str],
    additions: Iterable[str],
) -> list[str]:
    """Drop every line whose key is denied, then append `additions` as-is.

    Additions are not checked against the surviving lines: a key that is added
    but not denied ends up twice.
    """

    denied = set(denied_keys)
    patched = [line for line in lines if config_key(line) not in denied]
    patched.extend(additions)
    return patched


def patch_avd_config(
    config_path: Path,
    *,
    additions: Iterable[str],
    denied_keys: Iterable[str] = DENIED_KEYS,
) -> list[str]:
    """Patch `config_path` in place and return the written lines."""

    lines = config_path.read_text(encoding="utf-8").splitlines()
    patched = patch_config_lines(lines, denied_keys=denied_keys, additions=additions)
    config_path.write_text("\n".join(patched) + "\n", encoding="utf-8")
    return patched
