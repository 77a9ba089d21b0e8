"""Error taxonomy for script validation, execution and persistence."""
from typing import Optional


class BrowserScriptError(Exception):
    """Base exception for browserscript errors."""
    pass


class UnknownAction(BrowserScriptError):
    """Raised when an action declares a kind outside the recognized vocabulary."""

    def __init__(self, kind: object, index: Optional[int] = None):
        self.kind = kind
        self.index = index
        where = f" at action {index}" if index is not None else ""
        super().__init__(f"unknown action{where}: {kind!r}")


class InvalidParameters(BrowserScriptError):
    """Raised when a required parameter is missing or has the wrong shape."""

    def __init__(self, kind: str, details: str, index: Optional[int] = None):
        self.kind = kind
        self.details = details
        self.index = index
        where = f" at action {index}" if index is not None else ""
        super().__init__(f"invalid parameters for {kind}{where}: {details}")


class StepError(BrowserScriptError):
    """Base exception for failures raised while a compiled step runs."""

    def __init__(self, message: str, kind: str = "", index: Optional[int] = None):
        self.kind = kind
        self.index = index
        super().__init__(message)


class ElementNotFound(StepError):
    """Raised when a targeted locator matches zero elements."""

    def __init__(self, selector: str, kind: str = "", index: Optional[int] = None):
        self.selector = selector
        prefix = f"{kind}: " if kind else ""
        super().__init__(f"{prefix}no elements found for selector: {selector}", kind, index)


class StepTimeout(StepError):
    """Raised when a step does not finish within its per-step deadline."""

    def __init__(self, kind: str, timeout: float, context: str = "", index: Optional[int] = None):
        self.timeout = timeout
        self.context = context
        target = f" ({context})" if context else ""
        super().__init__(f"{kind}{target} timed out after {timeout:g}s", kind, index)


class DriverError(StepError):
    """Raised when the browser engine reports a failure."""

    def __init__(self, kind: str, message: str, index: Optional[int] = None):
        super().__init__(f"{kind}: {message}", kind, index)


class PersistenceError(BrowserScriptError):
    """Raised (and collected) when an artifact cannot be written to disk."""

    def __init__(self, name: str, path: str, reason: str):
        self.name = name
        self.path = path
        self.reason = reason
        super().__init__(f"failed to write artifact {name!r} to {path}: {reason}")
