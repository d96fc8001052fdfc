"""Generation of the helper scripts dropped into the project's `artifact/bin`.

Why in adapters:
- Templates and file permissions are infrastructure details.
- The pipeline only hands over the tokens to substitute.

Placeholders are literal `${name}` tokens replaced verbatim, no escaping.
"""

from __future__ import annotations

import stat
from datetime import datetime
from pathlib import Path
from typing import Mapping

GENERATOR_SIGNATURE = "Android Setup Helper"
SHOW_DEVICES_SCRIPT = "show-android-devices"
RUN_EMULATOR_PREFIX = "run-android-emulator-"

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def generated_timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]


def load_template(name: str, script_ext: str) -> str:
    """Loads `templates/<name><ext>` (`.sh` or `.cmd`)."""

    return (_TEMPLATES_DIR / f"{name}{script_ext}").read_text(encoding="utf-8")


def render_template(template: str, tokens: Mapping[str, str]) -> str:
    """Replaces every `${key}` with its value."""

    rendered = template
    for key, value in tokens.items():
        rendered = rendered.replace("${" + key + "}", value)
    return rendered


def write_script(content: str, output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    newline = "\r\n" if output_path.suffix == ".cmd" else "\n"
    with output_path.open("w", encoding="utf-8", newline=newline) as fh:
        fh.write(content)
    if output_path.suffix == ".sh":
        mode = output_path.stat().st_mode
        output_path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return output_path


def _common_tokens(sdk_rel_path: str) -> dict[str, str]:
    return {
        "sdk.rel.path": sdk_rel_path,
        "generator.signature": GENERATOR_SIGNATURE,
        "generated.timestamp": generated_timestamp(),
    }


def export_show_devices_script(*, bin_dir: Path, sdk_rel_path: str, script_ext: str) -> Path:
    """Writes `show-android-devices` for the host shell."""

    template = load_template(SHOW_DEVICES_SCRIPT, script_ext)
    content = render_template(template, _common_tokens(sdk_rel_path))
    return write_script(content, bin_dir / f"{SHOW_DEVICES_SCRIPT}{script_ext}")


def export_run_emulator_script(
    *,
    bin_dir: Path,
    avd_id: str,
    skin: str,
    sdk_rel_path: str,
    script_ext: str,
) -> Path:
    """Writes `run-android-emulator-<avd_id>` for the host shell."""

    tokens = _common_tokens(sdk_rel_path)
    tokens.update({"avd.id": avd_id, "skin": skin})
    template = load_template("run-android-emulator", script_ext)
    content = render_template(template, tokens)
    return write_script(content, bin_dir / f"{RUN_EMULATOR_PREFIX}{avd_id}{script_ext}")


def list_run_emulator_scripts(bin_dir: Path) -> list[Path]:
    if not bin_dir.is_dir():
        return []
    return sorted(p for p in bin_dir.iterdir() if p.is_file() and p.name.startswith(RUN_EMULATOR_PREFIX))
