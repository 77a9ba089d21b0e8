from typing import Protocol, Optional


class EngineError(Exception):
    """Raised by an engine when the browser reports a failure.

    Timeouts are reported with the builtin ``TimeoutError`` instead.
    """
    pass


class BrowserEngine(Protocol):
    def start(self, headless: bool = True, user_data_dir: Optional[str] = None, hide_overlays: bool = False) -> None:
        ...

    def stop(self) -> None:
        ...

    def install_dialog_handler(self) -> None:
        ...

    def remove_dialog_handler(self) -> None:
        ...

    def goto(self, url: str, timeout_ms: int = 15000) -> None:
        ...

    def wait_ready(self, selector: str, timeout_ms: int = 15000) -> None:
        ...

    def wait_visible(self, selector: str, timeout_ms: int = 15000) -> None:
        ...

    def pause(self, seconds: float) -> None:
        ...

    def count(self, selector: str) -> int:
        ...

    def click(self, selector: str, timeout_ms: int = 15000) -> None:
        ...

    def set_value(self, selector: str, value: str, timeout_ms: int = 15000) -> None:
        ...

    def evaluate(self, script: str, timeout_ms: int = 15000) -> None:
        ...

    def text(self, selector: str, timeout_ms: int = 15000) -> str:
        ...

    def screenshot(self, image_format: str = "png", quality: Optional[int] = None, timeout_ms: int = 15000) -> bytes:
        ...

    def element_screenshot(self, selector: str, image_format: str = "png", quality: Optional[int] = None, timeout_ms: int = 15000) -> bytes:
        ...
