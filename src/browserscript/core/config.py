import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

DEFAULT_TIMEOUT = 10.0
DEFAULT_OUTPUT_DIR = "./screenshots"
ENGINES = ("playwright", "selenium")


@dataclass
class RunConfig:
    """Settings for a single script run.

    ``timeout`` is the per-step budget in seconds: every step gets the full
    amount, it is never shared across steps.
    """
    timeout: float = DEFAULT_TIMEOUT
    output_dir: Union[str, Path] = DEFAULT_OUTPUT_DIR
    engine: str = "playwright"
    headless: bool = True
    user_data_dir: Optional[str] = None
    hide_overlays: bool = False

    def __post_init__(self):
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.engine not in ENGINES:
            raise ValueError(f"unknown engine {self.engine!r}, expected one of {', '.join(ENGINES)}")
        self.output_dir = Path(os.path.expanduser(str(self.output_dir)))
