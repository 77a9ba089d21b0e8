from __future__ import annotations

import pytest

from browserscript.core.actions import (
    Click, GetText, Navigate, Screenshot, SetValue, TakeElementScreenshot, Wait, WaitForNavigation,
)
from browserscript.core.errors import InvalidParameters, UnknownAction
from browserscript.core.models import Action, Script
from browserscript.core.validation import KNOWN_KINDS, validate_action, validate_script


def test_known_kinds_cover_vocabulary() -> None:
    assert set(KNOWN_KINDS) == {
        "navigate", "waitVisible", "waitReady", "waitForNavigation", "wait", "getText",
        "click", "setValue", "evaluate", "screenshot", "takeElementScreenshot",
    }


@pytest.mark.parametrize("kind", ["Navigate", "scroll", "", None, 3])
def test_unknown_kind_is_rejected(kind) -> None:  # noqa: ANN001
    with pytest.raises(UnknownAction) as exc:
        validate_action(Action(kind=kind, url="https://example.com"))
    assert exc.value.kind == kind


def test_navigate_and_get_text() -> None:
    assert validate_action(Action(kind="navigate", url="https://example.com")) == Navigate("https://example.com")
    assert validate_action(Action(kind="getText", selector="h1", result="title")) == GetText("h1", "title")


@pytest.mark.parametrize(
    "action, detail",
    [
        (Action(kind="navigate"), "missing 'url'"),
        (Action(kind="click", selector="   "), "'selector' must not be empty"),
        (Action(kind="getText", selector="h1"), "missing 'result'"),
        (Action(kind="setValue", selector="#username"), "missing 'value'"),
        (Action(kind="setValue", selector="#username", value=5), "'value' must be a string"),
        (Action(kind="evaluate", js=""), "'js' must not be empty"),
        (Action(kind="wait"), "missing 'timeout'"),
        (Action(kind="wait", timeout="2"), "'timeout' must be a number"),
        (Action(kind="wait", timeout=True), "'timeout' must be a number"),
        (Action(kind="wait", timeout=-1), "must not be negative"),
        (Action(kind="screenshot", result="full", format="gif"), "unsupported format"),
        (Action(kind="screenshot", result="full", format="jpeg", quality=101), "'quality'"),
        (Action(kind="takeElementScreenshot", result="hdr"), "missing 'selector'"),
    ],
)
def test_invalid_parameters(action: Action, detail: str) -> None:
    with pytest.raises(InvalidParameters) as exc:
        validate_action(action)
    assert exc.value.kind == action.kind
    assert detail in exc.value.details


def test_set_value_allows_empty_string() -> None:
    assert validate_action(Action(kind="setValue", selector="#q", value="")) == SetValue("#q", "")


def test_wait_accepts_int_and_float() -> None:
    assert validate_action(Action(kind="wait", timeout=2)) == Wait(2.0)
    assert validate_action(Action(kind="wait", timeout=0.25)) == Wait(0.25)


def test_wait_for_navigation_needs_no_parameters() -> None:
    step = validate_action(Action(kind="waitForNavigation"))
    assert step == WaitForNavigation()
    assert step.selector == "body"


def test_screenshot_defaults() -> None:
    step = validate_action(Action(kind="screenshot", result="full"))

    assert step == Screenshot(result="full", path="full", format="png", quality=None)
    assert step.filename == "full.png"


def test_screenshot_jpeg_defaults_quality_and_keeps_path() -> None:
    step = validate_action(Action(kind="screenshot", result="full", path="page", format="JPG"))

    assert step.format == "jpg"
    assert step.quality == 70
    assert step.filename == "page.jpg"


def test_png_ignores_quality() -> None:
    step = validate_action(Action(kind="takeElementScreenshot", selector="h1", result="hdr", quality=40))

    assert step == TakeElementScreenshot(selector="h1", result="hdr", path="hdr", format="png", quality=None)


@pytest.mark.parametrize(
    "action",
    [
        Action(kind="screenshot", result="full", path="../outside"),
        Action(kind="screenshot", result="full", path="/etc/cron.d/job"),
        Action(kind="screenshot", result="full", path="..\\outside"),
        Action(kind="takeElementScreenshot", selector="h1", result="hdr", path=".."),
        Action(kind="screenshot", result="shots/full"),
    ],
)
def test_artifact_path_must_stay_in_output_dir(action: Action) -> None:
    with pytest.raises(InvalidParameters) as exc:
        validate_action(action)
    assert "plain file name" in str(exc.value)


def test_validate_script_reports_index_of_first_bad_action() -> None:
    script = Script(
        name="bad",
        actions=[
            Action(kind="navigate", url="https://example.com"),
            Action(kind="click", selector="#submit"),
            Action(kind="hover", selector="#submit"),
            Action(kind="navigate"),
        ],
    )

    with pytest.raises(UnknownAction) as exc:
        validate_script(script)
    assert exc.value.index == 2
    assert "at action 2" in str(exc.value)


def test_validate_script_tags_invalid_parameters_with_index() -> None:
    script = Script(actions=[Action(kind="click", selector="a"), Action(kind="getText", selector="h1")])

    with pytest.raises(InvalidParameters) as exc:
        validate_script(script)
    assert exc.value.index == 1


def test_validate_script_returns_steps_in_order() -> None:
    script = Script(actions=[Action(kind="click", selector="a"), Action(kind="click", selector="b")])

    assert validate_script(script) == [Click("a"), Click("b")]
