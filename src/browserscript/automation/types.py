from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Dict, List

from ..core.errors import BrowserScriptError, PersistenceError


class RunState(str, Enum):
    VALIDATING = "validating"
    BOOTSTRAPPING = "bootstrapping"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class RunResult:
    state: RunState
    script_name: str = ""
    texts: Dict[str, str] = field(default_factory=dict)
    artifacts: Dict[str, Path] = field(default_factory=dict)
    error: Optional[BrowserScriptError] = None
    persistence_errors: List[PersistenceError] = field(default_factory=list)
    steps_total: int = 0
    steps_completed: int = 0
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.state == RunState.COMPLETED

    def raise_for_error(self) -> None:
        """Raise the error that terminated the run, if any."""
        if self.error is not None:
            raise self.error
