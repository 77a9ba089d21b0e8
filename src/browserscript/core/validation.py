"""Validation and normalization of raw actions into typed steps.

Every check here is pure: an :class:`~browserscript.core.models.Action` goes
in, a typed step (see :mod:`browserscript.core.actions`) or an exception comes
out. Nothing touches a browser.
"""
import numbers
from typing import Any, Callable, Dict, List, Optional

from .actions import (
    DEFAULT_IMAGE_FORMAT, DEFAULT_JPEG_QUALITY, IMAGE_FORMATS,
    Click, Evaluate, GetText, Navigate, Screenshot, SetValue, Step,
    TakeElementScreenshot, Wait, WaitForNavigation, WaitReady, WaitVisible,
)
from .errors import InvalidParameters, UnknownAction
from .models import Action, Script


def _require_text(action: Action, name: str, allow_empty: bool = False) -> str:
    value = getattr(action, name)
    if value is None:
        raise InvalidParameters(action.kind, f"missing '{name}'")
    if not isinstance(value, str):
        raise InvalidParameters(action.kind, f"'{name}' must be a string, got {type(value).__name__}")
    if not allow_empty and not value.strip():
        raise InvalidParameters(action.kind, f"'{name}' must not be empty")
    return value


def _optional_text(action: Action, name: str) -> Optional[str]:
    if getattr(action, name) is None:
        return None
    return _require_text(action, name)


def _image_options(action: Action) -> Dict[str, Any]:
    result = _require_text(action, "result")
    path = _optional_text(action, "path") or result
    # Artifacts are written directly under the output directory.
    if "/" in path or "\\" in path or path.strip() in (".", ".."):
        raise InvalidParameters(action.kind, f"'path' must be a plain file name, got {path!r}")

    fmt = _optional_text(action, "format") or DEFAULT_IMAGE_FORMAT
    fmt = fmt.lower()
    if fmt not in IMAGE_FORMATS:
        raise InvalidParameters(action.kind, f"unsupported format {fmt!r}, expected one of {', '.join(IMAGE_FORMATS)}")

    quality = action.quality
    if quality is not None:
        if isinstance(quality, bool) or not isinstance(quality, numbers.Integral) or not 0 <= quality <= 100:
            raise InvalidParameters(action.kind, "'quality' must be an integer between 0 and 100")
        quality = int(quality)
    if fmt == "png":
        quality = None
    elif quality is None:
        quality = DEFAULT_JPEG_QUALITY

    return {"result": result, "path": path, "format": fmt, "quality": quality}


def _navigate(action: Action) -> Step:
    return Navigate(url=_require_text(action, "url"))


def _wait_visible(action: Action) -> Step:
    return WaitVisible(selector=_require_text(action, "selector"))


def _wait_ready(action: Action) -> Step:
    return WaitReady(selector=_require_text(action, "selector"))


def _wait_for_navigation(action: Action) -> Step:
    return WaitForNavigation()


def _wait(action: Action) -> Step:
    duration = action.timeout
    if duration is None:
        raise InvalidParameters(action.kind, "missing 'timeout'")
    if isinstance(duration, bool) or not isinstance(duration, numbers.Real):
        raise InvalidParameters(action.kind, f"'timeout' must be a number of seconds, got {type(duration).__name__}")
    if duration < 0:
        raise InvalidParameters(action.kind, "'timeout' must not be negative")
    return Wait(seconds=float(duration))


def _get_text(action: Action) -> Step:
    return GetText(selector=_require_text(action, "selector"), result=_require_text(action, "result"))


def _click(action: Action) -> Step:
    return Click(selector=_require_text(action, "selector"))


def _set_value(action: Action) -> Step:
    return SetValue(
        selector=_require_text(action, "selector"),
        value=_require_text(action, "value", allow_empty=True),
    )


def _evaluate(action: Action) -> Step:
    return Evaluate(js=_require_text(action, "js"))


def _screenshot(action: Action) -> Step:
    return Screenshot(**_image_options(action))


def _take_element_screenshot(action: Action) -> Step:
    selector = _require_text(action, "selector")
    return TakeElementScreenshot(selector=selector, **_image_options(action))


VALIDATORS: Dict[str, Callable[[Action], Step]] = {
    "navigate": _navigate,
    "waitVisible": _wait_visible,
    "waitReady": _wait_ready,
    "waitForNavigation": _wait_for_navigation,
    "wait": _wait,
    "getText": _get_text,
    "click": _click,
    "setValue": _set_value,
    "evaluate": _evaluate,
    "screenshot": _screenshot,
    "takeElementScreenshot": _take_element_screenshot,
}

KNOWN_KINDS = tuple(VALIDATORS)


def validate_action(action: Action) -> Step:
    """Validate and normalize a single action.

    Args:
        action: The raw action as declared by the caller

    Returns:
        The typed step for the action's kind

    Raises:
        UnknownAction: If the kind is not recognized (case-sensitive)
        InvalidParameters: If a required parameter is missing or ill-shaped
    """
    validator = VALIDATORS.get(action.kind) if isinstance(action.kind, str) else None
    if validator is None:
        raise UnknownAction(action.kind)
    return validator(action)


def validate_script(script: Script) -> List[Step]:
    """Validate every action of a script, in order, before anything runs.

    Errors are re-raised with the zero-based index of the offending action.
    """
    steps: List[Step] = []
    for index, action in enumerate(script.actions):
        try:
            steps.append(validate_action(action))
        except UnknownAction as e:
            raise UnknownAction(e.kind, index=index) from None
        except InvalidParameters as e:
            raise InvalidParameters(e.kind, e.details, index=index) from None
    return steps
