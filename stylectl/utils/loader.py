"""
Loading Python modules from file paths.

Used for path-referenced reporters and ``additionalRules`` files.
"""

import hashlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType


class ModuleLoadError(Exception):
    """Raised when a file cannot be imported as a module."""


def load_module_from_path(path: Path, prefix: str) -> ModuleType:
    """Import the Python file at ``path`` under a private module name.

    The module name is derived from the resolved path, so two references
    to the same file load equivalent modules.

    Raises:
        ModuleLoadError: If the file is missing or raises while importing
    """
    path = Path(path).resolve()
    if not path.is_file():
        raise ModuleLoadError(f"{path} is not a file")

    digest = hashlib.sha1(str(path).encode()).hexdigest()[:12]
    module_name = f"_stylectl_{prefix}_{path.stem}_{digest}"

    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ModuleLoadError(f"{path} is not a Python module")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        del sys.modules[module_name]
        raise ModuleLoadError(f"{path}: {type(e).__name__}: {e}") from e
    return module
