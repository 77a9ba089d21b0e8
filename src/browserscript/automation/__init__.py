"""Execution layer for declarative browser scripts.

This package compiles validated steps into time-bounded operations, runs them
against a browser engine (Playwright/Selenium) and persists the named results
and screenshots they produce.
"""

from .types import RunResult, RunState
from .engine import BrowserEngine, EngineError
from .registry import ResultRegistry
from .compiler import CompiledStep, compile_script
from .runner import ScriptRunner, create_engine, execute_script

__all__ = [
    'BrowserEngine',
    'EngineError',
    'RunResult',
    'RunState',
    'ResultRegistry',
    'CompiledStep',
    'compile_script',
    'ScriptRunner',
    'create_engine',
    'execute_script',
]
