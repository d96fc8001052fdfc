"""Source of interactive answers.

The selection loops never touch stdin directly: the CLI injects a console
implementation, tests inject a scripted one.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class PromptSource(Protocol):
    def read(self, message: str) -> str:
        """Show `message` and return one line typed by the user (may be empty)."""

        ...
