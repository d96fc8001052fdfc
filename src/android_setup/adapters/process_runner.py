"""`ProcessRunner` backed by `subprocess.run`."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Mapping, Sequence

from android_setup.core.domain.models import ProcessOutcome
from android_setup.core.errors import ProcessFailedError


class SubprocessRunner:
    def __init__(self, *, timeout_seconds: float | None = None) -> None:
        self._timeout = timeout_seconds

    def invoke(
        self,
        executable: str | Path,
        args: Sequence[str],
        env: Mapping[str, str] | None = None,
        *,
        cwd: Path | None = None,
        input_text: str | None = None,
    ) -> ProcessOutcome:
        cmd = [str(executable), *args]
        merged_env = {**os.environ, **env} if env else None
        try:
            completed = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd else None,
                env=merged_env,
                input=input_text,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._timeout,
            )
        except OSError as exc:
            # Missing or not executable. Reported as an outcome so the stderr rule applies.
            return ProcessOutcome(stderr=f"unable to start {executable}: {exc}", return_code=None)
        except subprocess.TimeoutExpired as exc:
            raise ProcessFailedError(
                f"ERROR: {Path(str(executable)).name} did not finish within {self._timeout} seconds"
            ) from exc

        return ProcessOutcome(
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            return_code=completed.returncode,
        )
