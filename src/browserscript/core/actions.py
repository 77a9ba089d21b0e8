"""Typed, normalized step variants.

Each recognized action kind has one frozen dataclass carrying exactly the
parameters that kind needs. Instances are produced by the validator only, so
downstream code can rely on every field being present and well-typed.
"""
from dataclasses import dataclass
from typing import ClassVar, Dict, Optional, Tuple, Type, Union

DEFAULT_IMAGE_FORMAT = "png"
DEFAULT_JPEG_QUALITY = 70
IMAGE_FORMATS = ("png", "jpeg", "jpg")


@dataclass(frozen=True)
class Navigate:
    kind: ClassVar[str] = "navigate"
    url: str

    def describe(self) -> str:
        return self.url


@dataclass(frozen=True)
class WaitVisible:
    kind: ClassVar[str] = "waitVisible"
    selector: str

    def describe(self) -> str:
        return self.selector


@dataclass(frozen=True)
class WaitReady:
    kind: ClassVar[str] = "waitReady"
    selector: str

    def describe(self) -> str:
        return self.selector


@dataclass(frozen=True)
class WaitForNavigation:
    """Wait until the document body is ready after a page transition."""
    kind: ClassVar[str] = "waitForNavigation"
    selector: ClassVar[str] = "body"

    def describe(self) -> str:
        return self.selector


@dataclass(frozen=True)
class Wait:
    kind: ClassVar[str] = "wait"
    seconds: float

    def describe(self) -> str:
        return f"{self.seconds:g}s"


@dataclass(frozen=True)
class GetText:
    kind: ClassVar[str] = "getText"
    selector: str
    result: str

    def describe(self) -> str:
        return f"{self.selector} -> {self.result}"


@dataclass(frozen=True)
class Click:
    kind: ClassVar[str] = "click"
    selector: str

    def describe(self) -> str:
        return self.selector


@dataclass(frozen=True)
class SetValue:
    kind: ClassVar[str] = "setValue"
    selector: str
    value: str

    def describe(self) -> str:
        return self.selector


@dataclass(frozen=True)
class Evaluate:
    kind: ClassVar[str] = "evaluate"
    js: str

    def describe(self) -> str:
        first_line = self.js.strip().splitlines()[0] if self.js.strip() else ""
        return first_line if len(first_line) <= 60 else first_line[:57] + "..."


@dataclass(frozen=True)
class Screenshot:
    kind: ClassVar[str] = "screenshot"
    result: str
    path: str
    format: str = DEFAULT_IMAGE_FORMAT
    quality: Optional[int] = None

    @property
    def filename(self) -> str:
        return f"{self.path}.{self.format}"

    def describe(self) -> str:
        return self.result


@dataclass(frozen=True)
class TakeElementScreenshot:
    kind: ClassVar[str] = "takeElementScreenshot"
    selector: str
    result: str
    path: str
    format: str = DEFAULT_IMAGE_FORMAT
    quality: Optional[int] = None

    @property
    def filename(self) -> str:
        return f"{self.path}.{self.format}"

    def describe(self) -> str:
        return f"{self.selector} -> {self.result}"


Step = Union[
    Navigate, WaitVisible, WaitReady, WaitForNavigation, Wait, GetText,
    Click, SetValue, Evaluate, Screenshot, TakeElementScreenshot,
]

STEP_TYPES: Tuple[Type, ...] = (
    Navigate, WaitVisible, WaitReady, WaitForNavigation, Wait, GetText,
    Click, SetValue, Evaluate, Screenshot, TakeElementScreenshot,
)

STEPS_BY_KIND: Dict[str, Type] = {t.kind: t for t in STEP_TYPES}

# Steps that target a specific element and must find it before acting.
ELEMENT_STEPS = (GetText, Click, SetValue, TakeElementScreenshot)
