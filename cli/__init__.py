"""Command-line tools for inspecting thermograph sensor readings."""

from importlib import import_module
from types import ModuleType


# ``cli.app`` must keep resolving to the module rather than the Typer
# instance; tests patch attributes on that module path.
def __getattr__(name: str) -> ModuleType:
    if name == "app":
        return import_module("cli.app")
    raise AttributeError(name)
