"""
Helpers shared by CLI commands.
"""

import importlib
import json
from typing import Any, NoReturn, Optional

import typer
from rich.console import Console

from ...config import Settings
from ...core.errors import ConfigurationError
from ...core.reducer import ReducerFn

DEFAULT_REDUCER = "statetree.demo.todos:root_reducer"

console = Console()


def resolve_log_path(log_path: Optional[str]) -> str:
    return log_path or Settings.from_env().event_log


def load_reducer(ref: str) -> ReducerFn:
    """
    Import a reducer given as "package.module:attribute".

    Raises:
        ConfigurationError: If the reference is malformed or not callable
    """
    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(f"reducer must be given as module:attribute, got {ref!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as ex:
        raise ConfigurationError(f"cannot import {module_name!r}: {ex}") from ex
    target: Any = module
    for part in attr.split("."):
        if not hasattr(target, part):
            raise ConfigurationError(f"{module_name!r} has no attribute {attr!r}")
        target = getattr(target, part)
    if not callable(target):
        raise ConfigurationError(f"{ref!r} is not callable")
    return target


def fail(message: str, json_output: bool, code: int = 2, **fields: Any) -> NoReturn:
    """Report an error in the selected output mode and exit with code."""
    if json_output:
        print(json.dumps({"error": message, **fields}))
    else:
        console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(code)
