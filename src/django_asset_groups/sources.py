"""Resolved inputs of a group: local globs, local files and remote resources."""

from __future__ import annotations

import glob
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

import requests
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .exceptions import BuildFailureError, BuildTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT_SECONDS = 20


class AssetSource(ABC):
    """One resolved input of a group, loadable as text.

    ``url`` is the public URL of the input when it is known.
    """

    url: str | None

    @abstractmethod
    def load(self) -> str:
        """Return the source content.

        Raises:
            BuildFailureError: If the content cannot be read or fetched.
        """
        ...

    @abstractmethod
    def describe(self) -> str:
        """Short human-readable location, used in log messages."""
        ...


@dataclass(frozen=True)
class LocalFile(AssetSource):
    path: str
    url: str | None = field(default=None, compare=False)

    def load(self) -> str:
        try:
            return Path(self.path).read_text(encoding="utf-8")
        except OSError as e:
            logger.error("Cannot read asset %s: %s", self.path, e)
            raise BuildFailureError(f"Cannot read asset {self.path!r}: {e}") from e

    def describe(self) -> str:
        return self.path


@dataclass(frozen=True)
class LocalGlob(AssetSource):
    """Every file matching ``pattern``, concatenated in sorted path order."""

    pattern: str
    url: str | None = field(default=None, compare=False)

    def matches(self) -> list[str]:
        return sorted(p for p in glob.glob(self.pattern) if Path(p).is_file())

    def load(self) -> str:
        matched = self.matches()
        if not matched:
            logger.warning("Asset pattern %s matched no files", self.pattern)
            return ""
        return "\n".join(LocalFile(path).load() for path in matched)

    def describe(self) -> str:
        return self.pattern


@dataclass(frozen=True)
class RemoteResource(AssetSource):
    url: str
    timeout: float = DEFAULT_FETCH_TIMEOUT_SECONDS

    @property
    def fetch_url(self) -> str:
        if self.url.startswith("//"):
            return f"https:{self.url}"
        return self.url

    def load(self) -> str:
        try:
            return fetch_remote(self.fetch_url, self.timeout)
        except requests.Timeout as e:
            logger.error("Timed out fetching %s: %s", self.url, e)
            raise BuildTimeoutError(f"Timed out fetching {self.url!r}") from e
        except requests.RequestException as e:
            logger.error("Failed to fetch %s: %s", self.url, e)
            raise BuildFailureError(f"Failed to fetch {self.url!r}: {e}") from e

    def describe(self) -> str:
        return self.url


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=8),
    retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
    reraise=True,
)
def fetch_remote(url: str, timeout: float) -> str:
    """GET a remote asset, retrying connection errors and timeouts."""
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.text
