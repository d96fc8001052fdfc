"""Pick-one-from-a-list state machine shared by every interactive prompt.

States: PROMPTING -> VALIDATING -> ACCEPTED | REJECTED (back to PROMPTING) | QUIT.
In always-override mode the machine never prompts and never loops.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Collection

from android_setup.core.interfaces.prompt import PromptSource

QUIT_TOKEN = "QUIT"


class SelectionState(str, Enum):
    PROMPTING = "prompting"
    VALIDATING = "validating"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    QUIT = "quit"


class BlankInput(str, Enum):
    """What an empty answer means at a given call site."""

    USE_DEFAULT = "use_default"
    NO_INPUT = "no_input"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Selection:
    state: SelectionState
    value: str | None = None

    @property
    def accepted(self) -> bool:
        return self.state is SelectionState.ACCEPTED


class InteractiveSelector:
    """Resolves one value out of `candidates`.

    `unknown_message` is formatted with the rejected value; `no_input_message`
    is shown for blank answers when `on_blank` is `NO_INPUT`.
    """

    def __init__(
        self,
        *,
        candidates: Collection[str],
        prompt_source: PromptSource,
        always_override: bool,
        default: str | None = None,
        on_blank: BlankInput = BlankInput.UNKNOWN,
        unknown_message: str = "ERROR: Unknown selection - {value}",
        no_input_message: str = "ERROR: No valid input found",
        report_error: Callable[[str], None] | None = None,
        show_candidates: Callable[[], None] | None = None,
        quit_token: str = QUIT_TOKEN,
    ) -> None:
        self._candidates = candidates
        self._prompt_source = prompt_source
        self._always_override = always_override
        self._default = default
        self._on_blank = on_blank
        self._unknown_message = unknown_message
        self._no_input_message = no_input_message
        self._report_error = report_error or (lambda _message: None)
        self._show_candidates = show_candidates
        self._quit_token = quit_token
        self.state = SelectionState.PROMPTING

    def select(self, message: str) -> Selection:
        if self._always_override:
            return self._select_default()

        while True:
            self.state = SelectionState.PROMPTING
            if self._show_candidates is not None:
                self._show_candidates()
            answer = self._prompt_source.read(message)

            self.state = SelectionState.VALIDATING
            outcome = self._validate(answer)
            self.state = outcome.state
            if outcome.state is not SelectionState.REJECTED:
                return outcome

    def _select_default(self) -> Selection:
        value = self._default or ""
        if value in self._candidates:
            self.state = SelectionState.ACCEPTED
            return Selection(SelectionState.ACCEPTED, value)
        self._report_error(self._unknown_message.format(value=value))
        self.state = SelectionState.REJECTED
        return Selection(SelectionState.REJECTED, value)

    def _validate(self, answer: str) -> Selection:
        value = (answer or "").strip()
        if value.lower() == self._quit_token.lower():
            return Selection(SelectionState.QUIT)

        if not value:
            if self._on_blank is BlankInput.USE_DEFAULT and self._default:
                value = self._default
            elif self._on_blank is BlankInput.NO_INPUT:
                self._report_error(self._no_input_message)
                return Selection(SelectionState.REJECTED)

        if value not in self._candidates:
            self._report_error(self._unknown_message.format(value=value))
            return Selection(SelectionState.REJECTED, value)
        return Selection(SelectionState.ACCEPTED, value)
