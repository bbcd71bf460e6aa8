"""Build-and-cache of filtered group artifacts."""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence

from .chain import FilterChain
from .kinds import AssetKind
from .sources import AssetSource
from .storage.base import BaseAssetStorage

logger = logging.getLogger(__name__)


class BuildCache:
    """Serve artifacts by target path, building them on a miss.

    Staleness is structural: the target path is the chain identity, so any
    change to a group's files or filters yields a new path. A hit is never
    re-validated against the sources.

    One instance is meant to be shared by every AssetManager of a process.
    Concurrent requests for the same target wait on a per-target lock and
    reuse the first build instead of building again.
    """

    def __init__(self, storage: BaseAssetStorage) -> None:
        self.storage = storage
        self._built: dict[str, str] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def is_built(self, target_path: str) -> bool:
        return target_path in self._built or self.storage.exists(target_path)

    def get_or_build(
        self,
        target_path: str,
        sources: Sequence[AssetSource],
        chain: FilterChain,
        kind: AssetKind,
        force: bool = False,
    ) -> str:
        """Return the URL of the artifact at ``target_path``, building it if absent.

        Args:
            target_path: Artifact name relative to the cache.
            sources: Group inputs in declared order.
            chain: Filters applied to the concatenated inputs.
            kind: Kind of the group being built.
            force: Rebuild even if the artifact already exists.

        Raises:
            BuildFailureError: If a source or filter fails.
        """
        if not force and target_path in self._built:
            return self._built[target_path]

        with self._lock_for(target_path):
            if not force:
                if target_path in self._built:
                    return self._built[target_path]
                if self.storage.exists(target_path):
                    url = self.storage.url(target_path)
                    self._built[target_path] = url
                    logger.debug("Cache hit for %s", target_path)
                    return url

            url = self._build(target_path, sources, chain, kind)
            self._built[target_path] = url
            return url

    def _build(
        self,
        target_path: str,
        sources: Sequence[AssetSource],
        chain: FilterChain,
        kind: AssetKind,
    ) -> str:
        parts = []
        for source in sources:
            logger.debug("Loading %s for %s", source.describe(), target_path)
            parts.append(chain.apply_source(source.load(), kind, source.url))
        content = "\n".join(parts)
        content = chain.apply(content, kind)
        url = self.storage.save(target_path, content)
        logger.info(
            "Built %s from %d source(s) with filters [%s]: %s",
            target_path,
            len(sources),
            ", ".join(chain.names),
            url,
        )
        return url

    def _lock_for(self, target_path: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(target_path, threading.Lock())
