"""Loading a task from a CLI target string."""

from __future__ import annotations

import importlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType

from weft.core.task import Task


class TargetError(ValueError):
    """The CLI target could not be loaded as a Task."""


def _load_file(filepath: Path) -> ModuleType:
    if not filepath.is_file():
        raise TargetError(f"File not found: {filepath}")

    module_name = f"__weft_target_{filepath.stem}__"
    spec = importlib.util.spec_from_file_location(module_name, filepath)
    if spec is None or spec.loader is None:
        raise TargetError(f"Cannot load Python file: {filepath}")

    module = importlib.util.module_from_spec(spec)
    # Registered so dataclasses/pickling inside the file can find the module
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


def load_target(target: str) -> Task:
    """Resolve ``module:attribute`` or ``path/to/file.py:attribute`` to a Task.

    Args:
        target: The target string.

    Returns:
        The Task the target names.

    Raises:
        TargetError: If the target is malformed, can't be imported, or is
            not a Task.
    """
    location, sep, attribute = target.rpartition(":")
    if not sep or not location or not attribute:
        raise TargetError(f"Target must look like 'module:task' or 'file.py:task', got {target!r}")

    if location.endswith(".py"):
        module = _load_file(Path(location))
    else:
        try:
            module = importlib.import_module(location)
        except ImportError as e:
            raise TargetError(f"Cannot import module {location!r}: {e}") from e

    obj = getattr(module, attribute, None)
    if obj is None:
        raise TargetError(f"{location!r} has no attribute {attribute!r}")
    if not isinstance(obj, Task):
        raise TargetError(f"{target!r} is a {type(obj).__name__}, not a Task")
    return obj
