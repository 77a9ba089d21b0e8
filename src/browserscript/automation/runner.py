import logging
import time
from typing import List, Optional, Union
from pathlib import Path

from ..core.config import DEFAULT_OUTPUT_DIR, DEFAULT_TIMEOUT, RunConfig
from ..core.errors import DriverError, InvalidParameters, StepError, UnknownAction
from ..core.models import Script
from ..core.validation import validate_script
from .compiler import CompiledStep, compile_script
from .engine import BrowserEngine
from .registry import ResultRegistry
from .types import RunResult, RunState

logger = logging.getLogger("browserscript")


def create_engine(name: str) -> BrowserEngine:
    """Instantiate the engine registered under ``name``."""
    if name == "playwright":
        from .playwright_engine import PlaywrightEngine
        return PlaywrightEngine()
    if name == "selenium":
        from .selenium_engine import SeleniumEngine
        return SeleniumEngine()
    raise ValueError(f"unknown engine: {name}")


class ScriptRunner:
    """Runs one script against one browser session.

    The runner owns the engine for the duration of :meth:`run`: it starts
    it, installs the dialog policy, executes every step in declared order,
    stops at the first failure and always tears the session down before
    flushing results.
    """

    def __init__(self, engine: BrowserEngine, config: Optional[RunConfig] = None):
        self.engine = engine
        self.config = config or RunConfig()

    def run(self, script: Script) -> RunResult:
        started = time.monotonic()
        result = RunResult(state=RunState.VALIDATING, script_name=script.name, steps_total=len(script.actions))
        registry = ResultRegistry()

        try:
            steps = validate_script(script)
        except (UnknownAction, InvalidParameters) as e:
            logger.error("Script %r rejected: %s", script.name, e)
            result.state = RunState.FAILED
            result.error = e
            result.elapsed = time.monotonic() - started
            return result

        compiled = compile_script(steps, registry)
        logger.info("Running script %r (%d steps, %gs per step)", script.name, len(compiled), self.config.timeout)
        try:
            self._bootstrap(result)
            self._run_steps(compiled, result)
            result.state = RunState.COMPLETED
        except StepError as e:
            logger.error("Script %r failed: %s", script.name, e)
            result.state = RunState.FAILED
            result.error = e
        finally:
            self._teardown()

        result.texts = registry.texts()
        for name, value in result.texts.items():
            logger.info("%s: %s", name, value)
        result.artifacts, result.persistence_errors = registry.persist(self.config.output_dir)
        result.elapsed = time.monotonic() - started
        return result

    def _bootstrap(self, result: RunResult) -> None:
        result.state = RunState.BOOTSTRAPPING
        try:
            self.engine.start(
                headless=self.config.headless,
                user_data_dir=self.config.user_data_dir,
                hide_overlays=self.config.hide_overlays,
            )
            self.engine.install_dialog_handler()
        except Exception as e:
            logger.debug("Bootstrap failed", exc_info=True)
            raise DriverError("bootstrap", str(e) or e.__class__.__name__) from e

    def _run_steps(self, compiled: List[CompiledStep], result: RunResult) -> None:
        result.state = RunState.RUNNING
        for step in compiled:
            logger.debug("[%d/%d] %s %s", step.index + 1, len(compiled), step.kind, step.step.describe())
            step.execute(self.engine, self.config.timeout)
            result.steps_completed += 1

    def _teardown(self) -> None:
        try:
            self.engine.remove_dialog_handler()
        except Exception:
            logger.warning("Failed to remove dialog handler", exc_info=True)
        try:
            self.engine.stop()
        except Exception:
            logger.warning("Failed to stop browser engine", exc_info=True)


def execute_script(
    script: Script,
    timeout: float = DEFAULT_TIMEOUT,
    output_dir: Union[str, Path] = DEFAULT_OUTPUT_DIR,
    browser: Optional[BrowserEngine] = None,
    **options,
) -> RunResult:
    """Run ``script`` with a fresh engine and return the result.

    Extra keyword arguments are passed to :class:`RunConfig`. When ``browser``
    is omitted one is created from ``options["engine"]`` (Playwright by
    default).
    """
    config = RunConfig(timeout=timeout, output_dir=output_dir, **options)
    runner = ScriptRunner(browser or create_engine(config.engine), config)
    return runner.run(script)
