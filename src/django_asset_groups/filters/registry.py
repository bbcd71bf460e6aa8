"""Registry mapping filter names to lazily instantiated filter objects."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..exceptions import ConfigurationError, UnknownFilterError
from ..utils import import_class
from .base import BaseFilter, FilterContext

logger = logging.getLogger(__name__)


class FilterRegistry:
    """Name -> filter lookup.

    Names are matched lowercased. Each filter is built on first use with the
    option blob configured under its name and then reused for the lifetime
    of the registry.
    """

    def __init__(
        self,
        filters: Mapping[str, Any],
        options: Mapping[str, Any] | None = None,
        context: FilterContext | None = None,
    ) -> None:
        self._classes: dict[str, Any] = {name.lower(): cls for name, cls in filters.items()}
        self._options: dict[str, Any] = {name.lower(): blob for name, blob in (options or {}).items()}
        self.context = context
        self._instances: dict[str, BaseFilter] = {}

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._classes

    def names(self) -> list[str]:
        return list(self._classes)

    def options_for(self, name: str) -> dict[str, Any]:
        """The option blob a filter is (or will be) constructed with."""
        return dict(self._options.get(name.lower()) or {})

    def get(self, name: str) -> BaseFilter:
        """Return the filter registered under ``name``, building it if needed.

        Raises:
            UnknownFilterError: If nothing is registered under ``name``.
            ConfigurationError: If the registered class cannot be imported.
        """
        key = name.lower()
        instance = self._instances.get(key)
        if instance is not None:
            return instance
        if key not in self._classes:
            raise UnknownFilterError(f"No filter registered as {name!r}")

        cls = self._classes[key]
        if isinstance(cls, str):
            try:
                cls = import_class(cls)
            except (ImportError, AttributeError, ValueError) as e:
                raise ConfigurationError(
                    f"Cannot import filter {name!r} from {self._classes[key]!r}: {e}"
                ) from e

        instance = cls(self.options_for(key), self.context)
        logger.debug("Instantiated filter %s (%s)", key, type(instance).__name__)
        self._instances[key] = instance
        return instance
