"""External process contract.

Why Protocol:
- The pipeline only needs "run this tool, give me stdout/stderr".
- Tests swap in a recording fake without touching `subprocess`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Protocol, Sequence, runtime_checkable

from android_setup.core.domain.models import ProcessOutcome


@runtime_checkable
class ProcessRunner(Protocol):
    """Runs an executable to completion and captures its output.

    Design rules:
    - Blocking: every step of the pipeline waits for the tool to finish.
    - Never raises for a tool that merely failed; the outcome carries stderr.
    """

    def invoke(
        self,
        executable: str | Path,
        args: Sequence[str],
        env: Mapping[str, str] | None = None,
        *,
        cwd: Path | None = None,
        input_text: str | None = None,
    ) -> ProcessOutcome:
        ...
