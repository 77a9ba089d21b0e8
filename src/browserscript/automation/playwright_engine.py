import logging
from contextlib import contextmanager
from typing import Optional, Iterator

from playwright.sync_api import sync_playwright, Page, Browser, BrowserContext, Dialog
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from .engine import EngineError
from .stealth import LAUNCH_ARGS, SUPPRESSED_DEFAULT_ARGS, WINDOW_WIDTH, WINDOW_HEIGHT, LANGUAGES, init_scripts

logger = logging.getLogger(__name__)


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except PlaywrightTimeoutError as e:
        raise TimeoutError(f"{operation}: {e.message}") from e
    except PlaywrightError as e:
        raise EngineError(f"{operation}: {e.message}") from e


EVALUATE_TIMEOUT_MARKER = "__browserscript_evaluate_timeout__"

# Runs the script body as an indirect eval so statements are allowed, and
# rejects with the marker once the step budget is spent.
EVALUATE_WITH_TIMEOUT = """([body, ms, marker]) => new Promise((resolve, reject) => {
    const timer = setTimeout(() => reject(new Error(marker)), ms);
    Promise.resolve()
        .then(() => (0, eval)(body))
        .then(
            () => { clearTimeout(timer); resolve(); },
            (err) => { clearTimeout(timer); reject(err); },
        );
})"""


def _screenshot_type(image_format: str) -> str:
    return "jpeg" if image_format in ("jpeg", "jpg") else "png"


class PlaywrightEngine:
    def __init__(self):
        self._pw = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None
        self._dialog_listener = None

    def start(self, headless: bool = True, user_data_dir: Optional[str] = None, hide_overlays: bool = False) -> None:
        self._pw = sync_playwright().start()
        launch_args = {
            "headless": headless,
            "args": list(LAUNCH_ARGS),
            "ignore_default_args": list(SUPPRESSED_DEFAULT_ARGS),
        }
        context_args = {
            "viewport": {"width": WINDOW_WIDTH, "height": WINDOW_HEIGHT},
            "locale": LANGUAGES[0],
            "ignore_https_errors": True,
            # evaluate runs scripts through eval, which a page CSP may forbid.
            "bypass_csp": True,
        }
        with _translate_errors("launch"):
            if user_data_dir:
                self._context = self._pw.chromium.launch_persistent_context(user_data_dir, **launch_args, **context_args)
            else:
                self._browser = self._pw.chromium.launch(**launch_args)
                self._context = self._browser.new_context(**context_args)
            for script in init_scripts(hide_overlays):
                self._context.add_init_script(script=script)
            pages = self._context.pages
            self._page = pages[0] if pages else self._context.new_page()
        logger.debug("Chromium started (headless=%s, persistent=%s)", headless, bool(user_data_dir))

    def stop(self) -> None:
        try:
            if self._context:
                self._context.close()
            if self._browser:
                self._browser.close()
        finally:
            if self._pw:
                self._pw.stop()
            self._page = None
            self._context = None
            self._browser = None
            self._pw = None
            self._dialog_listener = None

    def _on_dialog(self, dialog: Dialog) -> None:
        logger.info("Accepting %s dialog: %s", dialog.type, dialog.message)
        try:
            dialog.accept()
        except PlaywrightError as e:
            # The page may have closed the dialog itself in the meantime.
            logger.warning("Could not accept dialog: %s", e.message)

    def install_dialog_handler(self) -> None:
        assert self._page is not None
        if self._dialog_listener is None:
            self._dialog_listener = self._on_dialog
            self._page.on("dialog", self._dialog_listener)

    def remove_dialog_handler(self) -> None:
        if self._page is not None and self._dialog_listener is not None:
            self._page.remove_listener("dialog", self._dialog_listener)
        self._dialog_listener = None

    def goto(self, url: str, timeout_ms: int = 15000) -> None:
        assert self._page is not None
        with _translate_errors(f"navigate to {url}"):
            self._page.goto(url, timeout=timeout_ms)

    def wait_ready(self, selector: str, timeout_ms: int = 15000) -> None:
        assert self._page is not None
        with _translate_errors(f"wait for {selector}"):
            self._page.wait_for_selector(selector, state="attached", timeout=timeout_ms)

    def wait_visible(self, selector: str, timeout_ms: int = 15000) -> None:
        assert self._page is not None
        with _translate_errors(f"wait for visible {selector}"):
            self._page.wait_for_selector(selector, state="visible", timeout=timeout_ms)

    def pause(self, seconds: float) -> None:
        assert self._page is not None
        # Unlike time.sleep this keeps dispatching page events (dialogs).
        with _translate_errors("wait"):
            self._page.wait_for_timeout(seconds * 1000)

    def count(self, selector: str) -> int:
        assert self._page is not None
        with _translate_errors(f"query {selector}"):
            return self._page.locator(selector).count()

    def click(self, selector: str, timeout_ms: int = 15000) -> None:
        assert self._page is not None
        with _translate_errors(f"click {selector}"):
            self._page.locator(selector).first.click(timeout=timeout_ms)

    def set_value(self, selector: str, value: str, timeout_ms: int = 15000) -> None:
        assert self._page is not None
        with _translate_errors(f"set value of {selector}"):
            self._page.locator(selector).first.fill(value, timeout=timeout_ms)

    def evaluate(self, script: str, timeout_ms: int = 15000) -> None:
        assert self._page is not None
        # Page.evaluate takes no timeout, so the timer runs inside the page.
        try:
            with _translate_errors("evaluate"):
                self._page.evaluate(EVALUATE_WITH_TIMEOUT, [script, timeout_ms, EVALUATE_TIMEOUT_MARKER])
        except EngineError as e:
            if EVALUATE_TIMEOUT_MARKER in str(e):
                raise TimeoutError(f"evaluate: script did not settle within {timeout_ms}ms") from e
            raise

    def text(self, selector: str, timeout_ms: int = 15000) -> str:
        assert self._page is not None
        with _translate_errors(f"read text of {selector}"):
            locator = self._page.locator(selector).first
            locator.wait_for(state="visible", timeout=timeout_ms)
            return locator.inner_text(timeout=timeout_ms)

    def screenshot(self, image_format: str = "png", quality: Optional[int] = None, timeout_ms: int = 15000) -> bytes:
        assert self._page is not None
        options = {"type": _screenshot_type(image_format), "full_page": True, "timeout": timeout_ms}
        if options["type"] == "jpeg" and quality is not None:
            options["quality"] = quality
        with _translate_errors("screenshot"):
            return self._page.screenshot(**options)

    def element_screenshot(self, selector: str, image_format: str = "png", quality: Optional[int] = None, timeout_ms: int = 15000) -> bytes:
        assert self._page is not None
        options = {"type": _screenshot_type(image_format), "timeout": timeout_ms}
        if options["type"] == "jpeg" and quality is not None:
            options["quality"] = quality
        with _translate_errors(f"screenshot of {selector}"):
            return self._page.locator(selector).first.screenshot(**options)
