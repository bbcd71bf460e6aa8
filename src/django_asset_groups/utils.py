"""Helpers for loading pluggable classes named in settings."""

from __future__ import annotations

from importlib import import_module
from typing import Any

from .conf import get_setting


def get_storage(backend_path: str | None = None) -> Any:
    """Import and instantiate the configured storage backend."""
    cls = import_class(backend_path or get_setting("STORAGE_BACKEND"))
    return cls()


def import_class(dotted_path: str) -> type:
    """Import a class from a dotted path string."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = import_module(module_path)
    return getattr(module, class_name)  # type: ignore[no-any-return]
