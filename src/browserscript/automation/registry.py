"""Named outputs produced during a run and their persistence.

The :class:`ResultRegistry` owns every slot for the lifetime of a run.
Compiled steps only hold a handle to the slot they fill. Text results and
image artifacts live in separate namespaces, so the same output name may be
used once in each.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from ..core.errors import PersistenceError

logger = logging.getLogger("browserscript")


@dataclass
class TextSlot:
    name: str
    value: Optional[str] = None
    filled: bool = False

    def fill(self, value: str) -> None:
        self.value = value
        self.filled = True


@dataclass
class ArtifactSlot:
    name: str
    data: Optional[bytes] = None
    filename: Optional[str] = None
    filled: bool = False

    def fill(self, data: bytes, filename: str) -> None:
        self.data = data
        self.filename = filename
        self.filled = True


class ResultRegistry:
    """Holds the text and artifact slots of a single run."""

    def __init__(self):
        self._texts: Dict[str, TextSlot] = {}
        self._artifacts: Dict[str, ArtifactSlot] = {}

    def text_slot(self, name: str) -> TextSlot:
        """Return the text slot for ``name``, creating it if needed.

        Actions sharing an output name share the slot, so the last
        successful write wins.
        """
        slot = self._texts.get(name)
        if slot is None:
            slot = self._texts[name] = TextSlot(name)
        return slot

    def artifact_slot(self, name: str) -> ArtifactSlot:
        """Return the artifact slot for ``name``, creating it if needed."""
        slot = self._artifacts.get(name)
        if slot is None:
            slot = self._artifacts[name] = ArtifactSlot(name)
        return slot

    def texts(self) -> Dict[str, str]:
        """Filled text results, in registration order."""
        return {name: slot.value for name, slot in self._texts.items() if slot.filled}

    def artifacts(self) -> Dict[str, ArtifactSlot]:
        """Filled artifact slots, in registration order."""
        return {name: slot for name, slot in self._artifacts.items() if slot.filled}

    def persist(self, output_dir: Union[str, Path]) -> Tuple[Dict[str, Path], List[PersistenceError]]:
        """Write every filled artifact to ``output_dir``.

        The directory is only created when there is something to write. A
        failure on one artifact is recorded and the remaining artifacts are
        still written.

        Args:
            output_dir: Target directory for ``<path>.<format>`` files

        Returns:
            Tuple of (written files by artifact name, persistence errors)
        """
        pending = self.artifacts()
        written: Dict[str, Path] = {}
        errors: List[PersistenceError] = []
        if not pending:
            return written, errors

        directory = Path(output_dir)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Could not create artifact directory %s: %s", directory, e)
            for name, slot in pending.items():
                errors.append(PersistenceError(name, str(directory / slot.filename), str(e)))
            return written, errors

        for name, slot in pending.items():
            target = directory / slot.filename
            try:
                target.write_bytes(slot.data)
            except OSError as e:
                logger.error("Failed to write artifact %s: %s", name, e)
                errors.append(PersistenceError(name, str(target), str(e)))
                continue
            logger.info("Saved %s (%d bytes) to %s", name, len(slot.data), target)
            written[name] = target
        return written, errors
