from __future__ import annotations

import os
import tempfile
from pathlib import Path

from ..conf import get_manager_config, get_setting
from .base import BaseAssetStorage


class LocalFileStorage(BaseAssetStorage):
    """Filesystem storage under the cache path.

    Files are written to ``cache_path`` and served from ``cache_url``; the
    two are configured independently. Writes go to a temporary file that is
    atomically renamed into place, so concurrent builders never expose a
    half-written artifact.
    """

    def __init__(self, cache_path: str | None = None, cache_url: str | None = None) -> None:
        self.cache_path = cache_path
        self.cache_url = cache_url

    def _get_root(self) -> Path:
        root = self.cache_path or get_manager_config()["cachePath"]
        if not root:
            raise ValueError("CACHE_PATH must be configured for LocalFileStorage")
        return Path(root)

    def _get_full_path(self, path: str) -> Path:
        root = self._get_root()
        full_path = (root / path).resolve()
        root_resolved = root.resolve()
        if not full_path.is_relative_to(root_resolved):
            raise ValueError(
                f"Path traversal detected: {path!r} resolves outside CACHE_PATH"
            )
        return full_path

    def url(self, path: str) -> str:
        cache_url: str = self.cache_url or get_setting("CACHE_URL")
        return f"{cache_url.rstrip('/')}/{path}"

    def save(self, path: str, content: str) -> str:
        full_path = self._get_full_path(path)
        full_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=full_path.parent, prefix=f".{full_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(content)
            os.replace(tmp_name, full_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return self.url(path)

    def exists(self, path: str) -> bool:
        return self._get_full_path(path).exists()
