"""Resolution of file references into URLs and asset sources.

A file reference is one of:

- a bare path relative to the kind directory (``"app.js"``),
- an alias-qualified path (``"vendor::jquery.js"``) looked up in ``paths``,
- a full URL (``"https://cdn.example.com/lib.js"``).
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .exceptions import ConfigurationError
from .kinds import AssetKind
from .sources import AssetSource, LocalFile, LocalGlob, RemoteResource

ALIAS_SEPARATOR = "::"
QUERY_MARKER = "?"
REMOTE_PREFIXES = ("//", "http://", "https://")
GLOB_MAGIC = ("*", "?", "[")


def is_remote(locator: str) -> bool:
    return locator.startswith(REMOTE_PREFIXES)


class PathResolver:
    """Resolve file references against the asset roots and the ``paths`` table.

    Aliases are matched by longest prefix, so ``"vendor::ui::x.js"`` uses an
    alias named ``"vendor::ui"`` over one named ``"vendor"`` when both exist.
    """

    def __init__(
        self,
        paths: Mapping[str, Any] | None = None,
        asset_url: str = "/assets",
        asset_path: str | None = None,
        document_root: str | None = None,
        fetch_timeout: float = 20,
    ) -> None:
        self.paths: dict[str, Any] = dict(paths or {})
        self.asset_url = asset_url
        self.asset_path = asset_path or os.path.realpath("./assets")
        self.document_root = document_root or os.getcwd()
        self.fetch_timeout = fetch_timeout
        self._aliases = sorted(self.paths, key=len, reverse=True)

    def resolve(self, file_ref: Any, kind: AssetKind) -> str:
        """Return the URL (or alias-resolved location) of a file reference.

        Raises:
            ConfigurationError: If an alias-qualified reference names an
                alias missing from ``paths``.
        """
        ref = _normalize_ref(file_ref)
        if ALIAS_SEPARATOR in ref:
            return self._resolve_alias(ref, kind)
        if is_remote(ref):
            return ref
        return f"{self.asset_url.rstrip('/')}/{kind.segment}/{ref}"

    def locate(self, file_ref: Any, kind: AssetKind) -> AssetSource:
        """Return the source to read when bundling a file reference.

        Local locators are anchored at the document root, including ones
        that climb out of it with ``..``.
        """
        ref = _normalize_ref(file_ref)
        locator = self.resolve(ref, kind)
        if ALIAS_SEPARATOR not in ref and not is_remote(ref):
            local = str(Path(self.asset_path) / kind.segment / ref)
            return self._local_source(local, locator)

        if is_remote(locator):
            return RemoteResource(locator, timeout=self.fetch_timeout)
        if locator.startswith(".."):
            local = os.path.realpath(os.path.join(self.document_root, locator))
            return self._local_source(local, locator)
        return self._local_source(str(Path(self.document_root) / locator.lstrip("/")), locator)

    def _resolve_alias(self, ref: str, kind: AssetKind) -> str:
        alias = self._match_alias(ref)
        subpath = ref[len(alias) + len(ALIAS_SEPARATOR):]
        location = self.paths[alias]

        kind_segment = f"{kind.segment}/"
        if isinstance(location, Mapping):
            kind_segment = location.get(
                f"{kind.value}_dir", location.get(f"{kind.segment}_dir", kind_segment)
            )
            root = location.get("path")
            if root is None:
                raise ConfigurationError(f"Alias {alias!r} has no 'path'")
        else:
            root = location
        root = str(root)
        kind_segment = kind_segment or ""

        if kind_segment and not kind_segment.endswith("/"):
            kind_segment += "/"
        if QUERY_MARKER in root:
            # The alias root already opened a query string.
            kind_segment = ""
        elif subpath.startswith(QUERY_MARKER):
            kind_segment = kind_segment.rstrip("/")

        return f"{root}{kind_segment}{subpath}"

    def _match_alias(self, ref: str) -> str:
        for alias in self._aliases:
            if ref.startswith(f"{alias}{ALIAS_SEPARATOR}"):
                return alias
        alias = ref.split(ALIAS_SEPARATOR, 1)[0]
        raise ConfigurationError(
            f"Unknown path alias {alias!r} in file reference {ref!r}"
        )

    @staticmethod
    def _local_source(path: str, url: str) -> AssetSource:
        if any(char in path for char in GLOB_MAGIC):
            return LocalGlob(path, url)
        return LocalFile(path, url)


def _normalize_ref(file_ref: Any) -> str:
    if isinstance(file_ref, (list, tuple)):
        if not file_ref:
            raise ConfigurationError("Empty file reference")
        file_ref = file_ref[0]
    if not isinstance(file_ref, str) or not file_ref:
        raise ConfigurationError(f"Invalid file reference: {file_ref!r}")
    return file_ref
