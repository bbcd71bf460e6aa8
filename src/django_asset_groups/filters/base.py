"""Base class for content filters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from ..kinds import AssetKind


@dataclass(frozen=True)
class FilterContext:
    """Filesystem and URL layout handed to every filter at construction."""

    asset_path: str
    asset_url: str
    cache_path: str
    cache_url: str
    timeout: float = 30
    debug: bool = False


class BaseFilter(ABC):
    """Abstract base class for filters.

    A filter receives the concatenated content of a group and returns the
    transformed content. Filters are instantiated once per registry with the
    option blob configured under their name.
    """

    def __init__(self, options: dict[str, Any] | None = None, context: FilterContext | None = None) -> None:
        self.options: dict[str, Any] = dict(options or {})
        self.context = context

    def apply_source(self, content: str, kind: AssetKind, url: str | None) -> str:
        """Transform one source before the group is concatenated.

        ``url`` is the public URL the source would be served from on its
        own. The default leaves the content unchanged.
        """
        return content

    @abstractmethod
    def apply(self, content: str, kind: AssetKind) -> str:
        """Transform content.

        Args:
            content: Concatenated group content.
            kind: Kind of the group being built.

        Returns:
            The filtered content.
        """
        ...
