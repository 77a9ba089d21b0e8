from __future__ import annotations

import time
from typing import Any

import pytest

from browserscript.automation.engine import EngineError


class FakeElement:
    def __init__(self, text: str = "", visible: bool = True) -> None:
        self.text = text
        self.visible = visible
        self.value = ""
        self.clicks = 0


class FakeEngine:
    """In-memory BrowserEngine: a page is a dict of selector -> FakeElement."""

    def __init__(self, pages: dict[str, dict[str, FakeElement]] | None = None) -> None:
        self.pages = pages or {}
        self.url: str | None = None
        self.calls: list[tuple] = []
        self.started = False
        self.stopped = False
        self.dialog_handler = False
        self.fail_start: Exception | None = None
        self.fail_on: dict[str, Exception] = {}
        self.pending_dialogs: list[str] = []
        self.accepted_dialogs: list[str] = []
        self.screenshot_bytes = b"\x89PNG\r\n\x1a\nfake"
        # selector -> [polls until attached, element]
        self.late_elements: dict[str, list] = {}
        self.polls = 0

    @property
    def dom(self) -> dict[str, FakeElement]:
        return self.pages.get(self.url or "", {})

    def _record(self, *call: Any) -> None:
        self.calls.append(call)
        error = self.fail_on.get(call[0])
        if error is not None:
            raise error
        if self.dialog_handler:
            while self.pending_dialogs:
                self.accepted_dialogs.append(self.pending_dialogs.pop(0))

    def start(self, headless: bool = True, user_data_dir: str | None = None, hide_overlays: bool = False) -> None:
        self.calls.append(("start", headless, user_data_dir, hide_overlays))
        if self.fail_start is not None:
            raise self.fail_start
        self.started = True

    def stop(self) -> None:
        self.calls.append(("stop",))
        self.stopped = True

    def install_dialog_handler(self) -> None:
        self.calls.append(("install_dialog_handler",))
        self.dialog_handler = True

    def remove_dialog_handler(self) -> None:
        self.calls.append(("remove_dialog_handler",))
        self.dialog_handler = False

    def goto(self, url: str, timeout_ms: int = 15000) -> None:
        self._record("goto", url)
        if url not in self.pages:
            raise EngineError(f"navigate to {url}: net::ERR_NAME_NOT_RESOLVED")
        self.url = url

    def _poll(self) -> None:
        self.polls += 1
        for selector, pending in list(self.late_elements.items()):
            pending[0] -= 1
            if pending[0] <= 0:
                self.dom[selector] = pending[1]
                del self.late_elements[selector]

    def wait_ready(self, selector: str, timeout_ms: int = 15000) -> None:
        self._record("wait_ready", selector)
        while selector not in self.dom and selector in self.late_elements:
            self._poll()
        if selector not in self.dom:
            raise TimeoutError(f"wait for {selector}")

    def wait_visible(self, selector: str, timeout_ms: int = 15000) -> None:
        self._record("wait_visible", selector)
        element = self.dom.get(selector)
        if element is None or not element.visible:
            raise TimeoutError(f"wait for visible {selector}")

    def pause(self, seconds: float) -> None:
        self._record("pause", seconds)
        time.sleep(seconds)

    def count(self, selector: str) -> int:
        self._record("count", selector)
        return 1 if selector in self.dom else 0

    def click(self, selector: str, timeout_ms: int = 15000) -> None:
        self._record("click", selector)
        self.dom[selector].clicks += 1

    def set_value(self, selector: str, value: str, timeout_ms: int = 15000) -> None:
        self._record("set_value", selector, value)
        self.dom[selector].value = value

    def evaluate(self, script: str, timeout_ms: int = 15000) -> Any:
        self._record("evaluate", script)
        if "alert(" in script or "confirm(" in script:
            self.pending_dialogs.append(script)
            self._record("dialog")
        return None

    def text(self, selector: str, timeout_ms: int = 15000) -> str:
        self._record("text", selector)
        return self.dom[selector].text

    def screenshot(self, image_format: str = "png", quality: int | None = None, timeout_ms: int = 15000) -> bytes:
        self._record("screenshot", image_format, quality)
        return self.screenshot_bytes

    def element_screenshot(self, selector: str, image_format: str = "png", quality: int | None = None, timeout_ms: int = 15000) -> bytes:
        self._record("element_screenshot", selector, image_format, quality)
        return self.screenshot_bytes + selector.encode()

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]


EXAMPLE_URL = "https://example.com"


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine(
        pages={
            EXAMPLE_URL: {
                "body": FakeElement(),
                "h1": FakeElement("Example Domain"),
                "p": FakeElement("This domain is for use in illustrative examples."),
                "#username": FakeElement(),
                "#submit": FakeElement("Submit"),
                "#hidden": FakeElement("secret", visible=False),
            }
        }
    )
