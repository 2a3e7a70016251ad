"""Helpers for locating a metadata registry declared in user code."""

from __future__ import annotations

import importlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType

from .registry import MetadataRegistry


class AppLoadError(RuntimeError):
    """Raised when a registry target cannot be imported."""


def load_module_from_path(*, module_name: str, module_path: Path) -> ModuleType:
    """Load a module from file path and register it in ``sys.modules``.

    Args:
        module_name (str): Import name for the module.
        module_path (Path): File system path to the Python module.

    Returns:
        ModuleType: Imported Python module object.
    """
    spec = importlib.util.spec_from_file_location(module_name, module_path)
    if spec is None or spec.loader is None:
        raise AppLoadError(f"Unable to import module from: {module_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        raise
    return module


def load_registry(target: str) -> MetadataRegistry:
    """Import ``module:attribute`` or ``path/to/file.py:attribute``.

    Args:
        target (str): Location of a :class:`MetadataRegistry` instance.

    Returns:
        MetadataRegistry: The registry the target names.
    """
    module_ref, separator, attribute = target.rpartition(":")
    if not separator or not module_ref or not attribute:
        raise AppLoadError(f"Expected 'module:attribute' or 'file.py:attribute', got {target!r}")

    module = _import_target_module(module_ref)
    value = getattr(module, attribute, None)
    if not isinstance(value, MetadataRegistry):
        raise AppLoadError(
            f"{target} must name a MetadataRegistry, got {type(value).__name__}"
        )
    return value


def _import_target_module(module_ref: str) -> ModuleType:
    if module_ref.endswith(".py"):
        module_path = Path(module_ref)
        if not module_path.is_file():
            raise AppLoadError(f"Registry module not found: {module_path}")
        return load_module_from_path(
            module_name=f"fluent_swagger_app_{module_path.stem}",
            module_path=module_path,
        )
    try:
        return importlib.import_module(module_ref)
    except ImportError as exc:
        raise AppLoadError(f"Unable to import registry module {module_ref}: {exc}") from exc
