"""Interactive answers read from the terminal (typer)."""

from __future__ import annotations

import typer


class ConsolePromptSource:
    """`PromptSource` that blocks on stdin; an empty answer is returned as ``""``."""

    def read(self, message: str) -> str:
        return typer.prompt(message.rstrip(), default="", show_default=False, prompt_suffix=" ")
