"""browserscript - run declarative browser scripts against a live browser."""

__version__ = "0.1.0"

# Avoid importing the browser engines at top-level to keep imports cheap
__all__ = ["Action", "Script", "RunConfig", "ScriptRunner", "execute_script"]

def __getattr__(name):
    if name in ("Action", "Script"):
        from .core import models
        return getattr(models, name)
    if name == "RunConfig":
        from .core.config import RunConfig
        return RunConfig
    if name in ("ScriptRunner", "execute_script"):
        from .automation import runner
        return getattr(runner, name)
    raise AttributeError(name)
