"""Definition Loader — imports controller and model modules from a directory.

Invariants:
    - Only public *.py files are imported (no leading underscore), in sorted order
    - Each file is imported once per process; repeat loads reuse sys.modules
    - Only classes DEFINED in a loaded file are collected (imports are skipped)
"""

import hashlib
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType

from sqlalchemy import inspect

from restmap.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

_MODULE_PREFIX = "restmap_loaded"


def load_subclasses(directory: str | Path, base: type) -> list[type]:
    """Strict subclasses of base defined in the directory's modules."""
    return [
        obj for obj in _defined_classes(directory)
        if issubclass(obj, base) and obj is not base
    ]


def load_mapped_classes(directory: str | Path) -> list[type]:
    """SQLAlchemy-mapped classes defined in the directory's modules."""
    return [
        obj for obj in _defined_classes(directory)
        if inspect(obj, raiseerr=False) is not None
    ]


def _defined_classes(directory: str | Path) -> list[type]:
    classes: list[type] = []
    for module in _load_modules(Path(directory)):
        classes.extend(
            obj for obj in vars(module).values()
            if isinstance(obj, type) and obj.__module__ == module.__name__
        )
    return classes


def _load_modules(directory: Path) -> list[ModuleType]:
    if not directory.is_dir():
        raise ConfigurationError(f"Definition directory not found: {directory}")
    modules = []
    for path in sorted(directory.glob("*.py")):
        if path.name.startswith("_"):
            continue
        modules.append(_import_file(path))
    logger.debug(f"Loaded {len(modules)} module(s) from {directory}")
    return modules


def _import_file(path: Path) -> ModuleType:
    resolved = path.resolve()
    digest = hashlib.sha1(str(resolved.parent).encode()).hexdigest()[:12]
    name = f"{_MODULE_PREFIX}_{digest}_{resolved.stem}"
    if name in sys.modules:
        return sys.modules[name]
    spec = importlib.util.spec_from_file_location(name, resolved)
    if spec is None or spec.loader is None:
        raise ConfigurationError(f"Cannot import definitions from {resolved}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        del sys.modules[name]
        raise
    return module
