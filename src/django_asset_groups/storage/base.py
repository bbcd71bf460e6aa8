from __future__ import annotations

from abc import ABC, abstractmethod


class BaseAssetStorage(ABC):
    """Abstract base class for artifact storage backends.

    Storage backends persist generated bundles under the cache location and
    return the public URLs that tags point at.
    """

    @abstractmethod
    def save(self, path: str, content: str) -> str:
        """Save artifact content to storage.

        Args:
            path: The artifact name relative to the cache (e.g., "3f2a9c1.css")
            content: The built artifact content

        Returns:
            The public URL of the saved artifact
        """
        ...

    @abstractmethod
    def url(self, path: str) -> str:
        """Return the public URL of an artifact without touching storage."""
        ...

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Check if an artifact exists in storage.

        Args:
            path: The artifact name to check

        Returns:
            True if the artifact exists
        """
        ...
