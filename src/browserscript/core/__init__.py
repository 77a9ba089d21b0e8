"""Core data model, validation and configuration for browserscript."""

from .models import Action, Script
from .config import RunConfig
from .errors import (
    BrowserScriptError,
    UnknownAction,
    InvalidParameters,
    StepError,
    ElementNotFound,
    StepTimeout,
    DriverError,
    PersistenceError,
)
from .validation import validate_action, validate_script, KNOWN_KINDS

__all__ = [
    'Action',
    'Script',
    'RunConfig',
    'BrowserScriptError',
    'UnknownAction',
    'InvalidParameters',
    'StepError',
    'ElementNotFound',
    'StepTimeout',
    'DriverError',
    'PersistenceError',
    'validate_action',
    'validate_script',
    'KNOWN_KINDS',
]
