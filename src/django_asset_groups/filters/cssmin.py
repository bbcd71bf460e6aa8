"""CSS compressor filter backed by rcssmin."""

from __future__ import annotations

import rcssmin

from ..kinds import AssetKind
from .base import BaseFilter


class CssCompressorFilter(BaseFilter):
    """Minify stylesheets with rcssmin.

    Options:
        keep_bang_comments: keep ``/*! ... */`` license comments (default True).
    """

    def apply(self, content: str, kind: AssetKind) -> str:
        keep = bool(self.options.get("keep_bang_comments", True))
        return rcssmin.cssmin(content, keep_bang_comments=keep)  # type: ignore[no-any-return]
