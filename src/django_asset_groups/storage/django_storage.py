from __future__ import annotations

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

from ..conf import get_setting
from .base import BaseAssetStorage


class DjangoStorageBackend(BaseAssetStorage):
    """Storage backend using Django's default file storage.

    Works with any Django storage backend (S3 via django-storages,
    local filesystem, GCS, Azure, etc.). Artifacts are stored under the
    ``STORAGE_PREFIX`` setting and served from the storage's own URLs.

    Writes are not atomic: ``save`` deletes an existing artifact before
    storing the new one, so a concurrent reader can briefly find it missing,
    and a backend that renames on collision may store it under another
    name (``save`` returns the URL of the name actually stored). Only
    ``--force`` rebuilds overwrite artifacts; use LocalFileStorage where
    atomic replacement matters.
    """

    def _get_name(self, path: str) -> str:
        prefix: str = get_setting("STORAGE_PREFIX")
        return f"{prefix}{path}"

    def url(self, path: str) -> str:
        return default_storage.url(self._get_name(path))

    def save(self, path: str, content: str) -> str:
        name = self._get_name(path)
        if default_storage.exists(name):
            default_storage.delete(name)

        saved_name = default_storage.save(name, ContentFile(content.encode("utf-8")))
        return default_storage.url(saved_name)

    def exists(self, path: str) -> bool:
        return default_storage.exists(self._get_name(path))
