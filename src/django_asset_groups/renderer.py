"""Per-group rendering: enablement, once-per-pass bookkeeping and tags."""

from __future__ import annotations

import logging

from .cache import BuildCache
from .chain import DEFAULT_HASH_LENGTH, FilterChain
from .exceptions import MissingFilesError
from .filters.registry import FilterRegistry
from .groups import GroupSpec
from .kinds import AssetKind
from .paths import PathResolver

logger = logging.getLogger(__name__)


class GroupRenderer:
    """Render groups into tags, at most once per ``(kind, name)``.

    A group moves to the rendered state on its first render call, whether it
    was enabled or not; later calls return the empty string until
    :meth:`reset` is called.
    """

    def __init__(
        self,
        resolver: PathResolver,
        registry: FilterRegistry,
        build_cache: BuildCache,
        debug: bool = False,
        hash_length: int = DEFAULT_HASH_LENGTH,
    ) -> None:
        self.resolver = resolver
        self.registry = registry
        self.build_cache = build_cache
        self.debug = debug
        self.hash_length = hash_length
        self._rendered: set[tuple[AssetKind, str]] = set()

    def chain_for(self, group: GroupSpec) -> FilterChain:
        return FilterChain(group.filters, self.registry, self.debug, self.hash_length)

    def is_rendered(self, kind: AssetKind, name: str) -> bool:
        return (kind, name) in self._rendered

    def reset(self) -> None:
        self._rendered.clear()

    def render(self, group: GroupSpec, kind: AssetKind) -> str:
        """Return the tags for ``group``, or "" if disabled or already rendered.

        Raises:
            MissingFilesError: If the group has filters but no files.
        """
        key = (kind, group.name)
        if key in self._rendered:
            return ""
        self._rendered.add(key)

        if not group.enabled:
            logger.debug("Skipping disabled %s group %s", kind.value, group.name)
            return ""

        if not group.filters:
            return "".join(
                kind.tag(self.resolver.resolve(ref, kind)) for ref in group.files
            )

        return kind.tag(self.build(group, kind))

    def build(self, group: GroupSpec, kind: AssetKind, force: bool = False) -> str:
        """Build (or fetch from cache) the artifact of a filtered group.

        Returns:
            The public URL of the artifact.

        Raises:
            MissingFilesError: If the group has no files.
        """
        if not group.files:
            raise MissingFilesError(
                f"Cannot build {kind.value} group {group.name!r}: it has no files"
            )
        chain = self.chain_for(group)
        target_path = chain.target_path(group.files, kind)
        sources = [self.resolver.locate(ref, kind) for ref in group.files]
        return self.build_cache.get_or_build(target_path, sources, chain, kind, force=force)
