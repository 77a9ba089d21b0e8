"""Compile validated steps into time-bounded operations against an engine."""
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, Union

from ..core.actions import (
    Click, Evaluate, GetText, Navigate, Screenshot, SetValue, Step,
    TakeElementScreenshot, Wait, WaitForNavigation, WaitReady, WaitVisible,
)
from ..core.errors import DriverError, ElementNotFound, StepError, StepTimeout
from .engine import BrowserEngine, EngineError
from .registry import ArtifactSlot, ResultRegistry, TextSlot

Slot = Union[TextSlot, ArtifactSlot]
Operation = Callable[[BrowserEngine, "Deadline"], None]


class Deadline:
    """Time budget for one step. Every step gets a fresh one."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        self.expires_at = time.monotonic() + timeout

    def remaining(self) -> float:
        return self.expires_at - time.monotonic()

    def remaining_ms(self) -> int:
        """Milliseconds left, raising ``TimeoutError`` once exhausted."""
        remaining = self.remaining()
        if remaining <= 0:
            raise TimeoutError("step deadline exceeded")
        return max(1, int(remaining * 1000))

    def check(self) -> None:
        if self.remaining() <= 0:
            raise TimeoutError("step deadline exceeded")


@dataclass
class CompiledStep:
    index: int
    step: Step
    operation: Operation
    slot: Optional[Slot] = None

    @property
    def kind(self) -> str:
        return self.step.kind

    def execute(self, engine: BrowserEngine, timeout: float) -> None:
        """Run the bound operation under a fresh per-step deadline.

        Raises:
            ElementNotFound: If a targeted element is missing
            StepTimeout: If the step overran its deadline
            DriverError: If the engine reported a failure
        """
        deadline = Deadline(timeout)
        try:
            self.operation(engine, deadline)
        except StepError as e:
            if e.index is None:
                e.index = self.index
            raise
        except TimeoutError as e:
            raise StepTimeout(self.kind, timeout, self.step.describe(), index=self.index) from e
        except EngineError as e:
            raise DriverError(self.kind, str(e), index=self.index) from e
        except Exception as e:
            raise DriverError(self.kind, str(e) or type(e).__name__, index=self.index) from e


def _require_element(engine: BrowserEngine, selector: str, kind: str, deadline: Deadline) -> None:
    try:
        engine.wait_ready(selector, deadline.remaining_ms())
    except TimeoutError:
        if engine.count(selector) == 0:
            raise ElementNotFound(selector, kind) from None
        raise


def _navigate(step: Navigate, registry: ResultRegistry) -> Tuple[Operation, None]:
    def run(engine, deadline):
        engine.goto(step.url, deadline.remaining_ms())
    return run, None


def _wait_visible(step: WaitVisible, registry: ResultRegistry) -> Tuple[Operation, None]:
    def run(engine, deadline):
        engine.wait_visible(step.selector, deadline.remaining_ms())
    return run, None


def _wait_ready(step: Union[WaitReady, WaitForNavigation], registry: ResultRegistry) -> Tuple[Operation, None]:
    def run(engine, deadline):
        engine.wait_ready(step.selector, deadline.remaining_ms())
    return run, None


def _wait(step: Wait, registry: ResultRegistry) -> Tuple[Operation, None]:
    def run(engine, deadline):
        if step.seconds > deadline.timeout:
            engine.pause(max(deadline.remaining(), 0))
            raise TimeoutError(f"wait of {step.seconds:g}s exceeds the step timeout")
        engine.pause(step.seconds)
    return run, None


def _get_text(step: GetText, registry: ResultRegistry) -> Tuple[Operation, TextSlot]:
    slot = registry.text_slot(step.result)

    def run(engine, deadline):
        _require_element(engine, step.selector, step.kind, deadline)
        slot.fill(engine.text(step.selector, deadline.remaining_ms()))
    return run, slot


def _click(step: Click, registry: ResultRegistry) -> Tuple[Operation, None]:
    def run(engine, deadline):
        _require_element(engine, step.selector, step.kind, deadline)
        engine.click(step.selector, deadline.remaining_ms())
    return run, None


def _set_value(step: SetValue, registry: ResultRegistry) -> Tuple[Operation, None]:
    def run(engine, deadline):
        _require_element(engine, step.selector, step.kind, deadline)
        engine.set_value(step.selector, step.value, deadline.remaining_ms())
    return run, None


def _evaluate(step: Evaluate, registry: ResultRegistry) -> Tuple[Operation, None]:
    def run(engine, deadline):
        engine.evaluate(step.js, deadline.remaining_ms())
        deadline.check()
    return run, None


def _screenshot(step: Screenshot, registry: ResultRegistry) -> Tuple[Operation, ArtifactSlot]:
    slot = registry.artifact_slot(step.result)

    def run(engine, deadline):
        engine.wait_ready("body", deadline.remaining_ms())
        data = engine.screenshot(step.format, step.quality, deadline.remaining_ms())
        slot.fill(data, step.filename)
    return run, slot


def _take_element_screenshot(step: TakeElementScreenshot, registry: ResultRegistry) -> Tuple[Operation, ArtifactSlot]:
    slot = registry.artifact_slot(step.result)

    def run(engine, deadline):
        _require_element(engine, step.selector, step.kind, deadline)
        engine.wait_visible(step.selector, deadline.remaining_ms())
        data = engine.element_screenshot(step.selector, step.format, step.quality, deadline.remaining_ms())
        slot.fill(data, step.filename)
    return run, slot


BUILDERS: Dict[Type, Callable[[Any, ResultRegistry], Tuple[Operation, Optional[Slot]]]] = {
    Navigate: _navigate,
    WaitVisible: _wait_visible,
    WaitReady: _wait_ready,
    WaitForNavigation: _wait_ready,
    Wait: _wait,
    GetText: _get_text,
    Click: _click,
    SetValue: _set_value,
    Evaluate: _evaluate,
    Screenshot: _screenshot,
    TakeElementScreenshot: _take_element_screenshot,
}


def compile_step(index: int, step: Step, registry: ResultRegistry) -> CompiledStep:
    builder = BUILDERS.get(type(step))
    if builder is None:
        raise TypeError(f"no compiler for step type {type(step).__name__}")
    operation, slot = builder(step, registry)
    return CompiledStep(index=index, step=step, operation=operation, slot=slot)


def compile_script(steps: List[Step], registry: ResultRegistry) -> List[CompiledStep]:
    """Bind every validated step to its operation, registering output slots up front."""
    return [compile_step(i, step, registry) for i, step in enumerate(steps)]
