import base64
import logging
import time
from contextlib import contextmanager
from typing import Optional, Iterator

try:
    from selenium import webdriver
    from selenium.common.exceptions import NoAlertPresentException, TimeoutException, WebDriverException
    from selenium.webdriver.common.by import By
    from selenium.webdriver.chrome.options import Options as ChromeOptions
    from selenium.webdriver.support import expected_conditions as EC
    from selenium.webdriver.support.ui import WebDriverWait
    SELENIUM_AVAILABLE = True
except Exception:  # pragma: no cover - optional dependency
    SELENIUM_AVAILABLE = False

from .engine import EngineError
from .stealth import LAUNCH_ARGS, SUPPRESSED_DEFAULT_ARGS, LANGUAGES, init_scripts

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.1


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except TimeoutException as e:
        raise TimeoutError(f"{operation}: {e.msg or 'timed out'}") from e
    except WebDriverException as e:
        raise EngineError(f"{operation}: {e.msg or e.__class__.__name__}") from e


def _seconds(timeout_ms: int) -> float:
    return max(timeout_ms, 1) / 1000.0


class SeleniumEngine:
    def __init__(self):
        if not SELENIUM_AVAILABLE:
            raise RuntimeError("Selenium is not installed. Install with: pip install .[automation-selenium]")
        self._driver: Optional[webdriver.Chrome] = None
        self._accept_dialogs = False

    def start(self, headless: bool = True, user_data_dir: Optional[str] = None, hide_overlays: bool = False) -> None:
        options = ChromeOptions()
        if headless:
            options.add_argument("--headless=new")
        for arg in LAUNCH_ARGS:
            options.add_argument(arg)
        options.add_argument(f"--lang={LANGUAGES[0]}")
        if user_data_dir:
            options.add_argument(f"--user-data-dir={user_data_dir}")
        options.add_experimental_option("excludeSwitches", [a.lstrip("-") for a in SUPPRESSED_DEFAULT_ARGS])
        options.add_experimental_option("useAutomationExtension", False)
        # Dialogs are accepted explicitly while the dialog handler is installed.
        options.set_capability("unhandledPromptBehavior", "ignore")
        with _translate_errors("launch"):
            self._driver = webdriver.Chrome(options=options)
            for script in init_scripts(hide_overlays):
                self._driver.execute_cdp_cmd("Page.addScriptToEvaluateOnNewDocument", {"source": script})
        logger.debug("Chrome started via Selenium (headless=%s)", headless)

    def stop(self) -> None:
        if self._driver:
            try:
                self._driver.quit()
            finally:
                self._driver = None
                self._accept_dialogs = False

    def install_dialog_handler(self) -> None:
        self._accept_dialogs = True

    def remove_dialog_handler(self) -> None:
        self._accept_dialogs = False

    def _accept_open_dialog(self) -> None:
        if not self._accept_dialogs or self._driver is None:
            return
        try:
            alert = self._driver.switch_to.alert
        except NoAlertPresentException:
            return
        logger.info("Accepting dialog: %s", alert.text)
        alert.accept()

    def _wait_until(self, condition, timeout_ms: int):
        assert self._driver is not None

        def check(driver):
            self._accept_open_dialog()
            return condition(driver)

        return WebDriverWait(self._driver, _seconds(timeout_ms), poll_frequency=POLL_INTERVAL).until(check)

    def goto(self, url: str, timeout_ms: int = 15000) -> None:
        assert self._driver is not None
        with _translate_errors(f"navigate to {url}"):
            self._driver.set_page_load_timeout(_seconds(timeout_ms))
            self._driver.get(url)

    def wait_ready(self, selector: str, timeout_ms: int = 15000) -> None:
        with _translate_errors(f"wait for {selector}"):
            self._wait_until(EC.presence_of_element_located((By.CSS_SELECTOR, selector)), timeout_ms)

    def wait_visible(self, selector: str, timeout_ms: int = 15000) -> None:
        with _translate_errors(f"wait for visible {selector}"):
            self._wait_until(EC.visibility_of_element_located((By.CSS_SELECTOR, selector)), timeout_ms)

    def pause(self, seconds: float) -> None:
        end = time.monotonic() + seconds
        with _translate_errors("wait"):
            while True:
                self._accept_open_dialog()
                remaining = end - time.monotonic()
                if remaining <= 0:
                    return
                time.sleep(min(POLL_INTERVAL, remaining))

    def count(self, selector: str) -> int:
        assert self._driver is not None
        with _translate_errors(f"query {selector}"):
            self._accept_open_dialog()
            return len(self._driver.find_elements(By.CSS_SELECTOR, selector))

    def click(self, selector: str, timeout_ms: int = 15000) -> None:
        with _translate_errors(f"click {selector}"):
            elem = self._wait_until(EC.element_to_be_clickable((By.CSS_SELECTOR, selector)), timeout_ms)
            elem.click()

    def set_value(self, selector: str, value: str, timeout_ms: int = 15000) -> None:
        with _translate_errors(f"set value of {selector}"):
            elem = self._wait_until(EC.presence_of_element_located((By.CSS_SELECTOR, selector)), timeout_ms)
            elem.clear()
            elem.send_keys(value)

    def evaluate(self, script: str, timeout_ms: int = 15000) -> None:
        assert self._driver is not None
        with _translate_errors("evaluate"):
            self._driver.set_script_timeout(_seconds(timeout_ms))
            self._driver.execute_script(script)

    def text(self, selector: str, timeout_ms: int = 15000) -> str:
        with _translate_errors(f"read text of {selector}"):
            elem = self._wait_until(EC.visibility_of_element_located((By.CSS_SELECTOR, selector)), timeout_ms)
            return elem.text

    def _capture(self, image_format: str, quality: Optional[int], clip: Optional[dict] = None) -> bytes:
        assert self._driver is not None
        params: dict = {"format": "jpeg" if image_format in ("jpeg", "jpg") else "png", "captureBeyondViewport": True}
        if params["format"] == "jpeg" and quality is not None:
            params["quality"] = quality
        if clip:
            params["clip"] = dict(clip, scale=1)
        result = self._driver.execute_cdp_cmd("Page.captureScreenshot", params)
        return base64.b64decode(result["data"])

    def screenshot(self, image_format: str = "png", quality: Optional[int] = None, timeout_ms: int = 15000) -> bytes:
        with _translate_errors("screenshot"):
            return self._capture(image_format, quality)

    def element_screenshot(self, selector: str, image_format: str = "png", quality: Optional[int] = None, timeout_ms: int = 15000) -> bytes:
        with _translate_errors(f"screenshot of {selector}"):
            elem = self._wait_until(EC.visibility_of_element_located((By.CSS_SELECTOR, selector)), timeout_ms)
            rect = elem.rect
            clip = {"x": rect["x"], "y": rect["y"], "width": rect["width"], "height": rect["height"]}
            return self._capture(image_format, quality, clip)
