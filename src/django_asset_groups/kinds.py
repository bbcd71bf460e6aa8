"""The two asset kinds and their URL segments, extensions and tags."""

from __future__ import annotations

from django.db import models

from .exceptions import InvalidKindError

_LEGACY_NAMES = {"css": "style", "js": "script"}


class AssetKind(models.TextChoices):
    STYLE = "style", "Stylesheet"
    SCRIPT = "script", "Script"

    @property
    def segment(self) -> str:
        """Directory segment used in asset URLs and paths ("css" or "js")."""
        return "css" if self is AssetKind.STYLE else "js"

    @property
    def extension(self) -> str:
        return self.segment

    def tag(self, url: str) -> str:
        if self is AssetKind.STYLE:
            return f'<link rel="stylesheet" href="{url}">'
        return f'<script type="text/javascript" src="{url}"></script>'

    @classmethod
    def parse(cls, value: object) -> AssetKind:
        """Map "style"/"script" (or the legacy "css"/"js") to a kind.

        Raises:
            InvalidKindError: If the value names neither kind.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.lower()
            name = _LEGACY_NAMES.get(name, name)
            for kind in cls:
                if kind.value == name:
                    return kind
        raise InvalidKindError(f"Unknown asset kind: {value!r}")
