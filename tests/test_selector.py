"""Tests for the interactive selection state machine."""

from __future__ import annotations

import pytest

from android_setup.core.services.selector import BlankInput, InteractiveSelector, SelectionState

from conftest import ScriptedPrompt

CANDIDATES = ["system-images;a", "system-images;b"]


def _selector(answers, *, always_override=False, default=None, on_blank=BlankInput.UNKNOWN, errors=None):
    prompt = ScriptedPrompt(answers)
    selector = InteractiveSelector(
        candidates=CANDIDATES,
        prompt_source=prompt,
        always_override=always_override,
        default=default,
        on_blank=on_blank,
        unknown_message="unknown selection - {value}",
        no_input_message="no valid input",
        report_error=errors.append if errors is not None else None,
    )
    return selector, prompt


def test_override_returns_default_without_prompting():
    selector, prompt = _selector([], always_override=True, default="system-images;b")
    selection = selector.select("pick one")
    assert selection.accepted
    assert selection.value == "system-images;b"
    assert prompt.messages == []
    assert selector.state is SelectionState.ACCEPTED


def test_override_with_missing_default_is_rejected_once():
    errors: list[str] = []
    selector, prompt = _selector([], always_override=True, default="system-images;zzz", errors=errors)
    selection = selector.select("pick one")
    assert selection.state is SelectionState.REJECTED
    assert errors == ["unknown selection - system-images;zzz"]
    assert prompt.messages == []


def test_unknown_then_quit():
    errors: list[str] = []
    selector, prompt = _selector(["bogus", "QUIT"], errors=errors)
    selection = selector.select("pick one")
    assert selection.state is SelectionState.QUIT
    assert selection.value is None
    assert errors == ["unknown selection - bogus"]
    assert len(prompt.messages) == 2


@pytest.mark.parametrize("token", ["quit", "Quit", "  QUIT  "])
def test_quit_is_case_insensitive(token):
    selector, _ = _selector([token])
    assert selector.select("pick one").state is SelectionState.QUIT


def test_blank_uses_default_when_configured():
    selector, _ = _selector([""], default="system-images;a", on_blank=BlankInput.USE_DEFAULT)
    selection = selector.select("pick one")
    assert selection.accepted
    assert selection.value == "system-images;a"


def test_blank_reports_no_input_and_reprompts():
    errors: list[str] = []
    selector, prompt = _selector(["", "system-images;b"], on_blank=BlankInput.NO_INPUT, errors=errors)
    selection = selector.select("pick one")
    assert selection.value == "system-images;b"
    assert errors == ["no valid input"]
    assert len(prompt.messages) == 2


def test_blank_treated_as_unknown():
    errors: list[str] = []
    selector, _ = _selector(["", "system-images;a"], default="system-images;b", errors=errors)
    selection = selector.select("pick one")
    assert selection.value == "system-images;a"
    assert errors == ["unknown selection - "]


def test_candidates_shown_before_each_prompt():
    shown: list[int] = []
    selector = InteractiveSelector(
        candidates=CANDIDATES,
        prompt_source=ScriptedPrompt(["nope", "system-images;a"]),
        always_override=False,
        show_candidates=lambda: shown.append(1),
    )
    selector.select("pick one")
    assert len(shown) == 2
