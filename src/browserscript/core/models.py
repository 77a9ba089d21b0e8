from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional, List, Dict, Any, Union
import json

# JSON key for each Action attribute; everything else maps to itself.
_KEY_ALIASES = {"kind": "action"}


@dataclass
class Action:
    """A single declared browser step, exactly as the caller wrote it.

    No validation happens here; see ``browserscript.core.validation`` for the
    checks that turn an Action into an executable step.
    """
    kind: Any
    url: Any = None
    selector: Any = None
    result: Any = None
    path: Any = None
    format: Any = None
    quality: Any = None
    timeout: Any = None
    js: Any = None
    value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the action to a dictionary, omitting unset fields."""
        data: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None and f.name != "kind":
                continue
            data[_KEY_ALIASES.get(f.name, f.name)] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Action':
        """Create an Action from a dictionary. Unknown keys are ignored."""
        kwargs = {}
        for f in fields(cls):
            key = _KEY_ALIASES.get(f.name, f.name)
            if key in data:
                kwargs[f.name] = data[key]
        kwargs.setdefault("kind", None)
        return cls(**kwargs)


@dataclass
class Script:
    """An ordered list of actions plus a descriptive name."""
    name: str = ""
    actions: List[Action] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'actions': [a.to_dict() for a in self.actions],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Script':
        return cls(
            name=data.get('name', ''),
            actions=[Action.from_dict(a) for a in data.get('actions', [])],
        )

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str) -> 'Script':
        return cls.from_dict(json.loads(text))

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'Script':
        """Load a script from a JSON file."""
        with open(path, 'r', encoding='utf-8') as f:
            return cls.from_dict(json.load(f))
