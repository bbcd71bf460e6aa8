"""Rewrite relative ``url()`` references for stylesheets served from the cache."""

from __future__ import annotations

import re
from urllib.parse import urljoin

from ..kinds import AssetKind
from .base import BaseFilter

URL_PATTERN = re.compile(r"""url\(\s*(['"]?)(?P<url>[^'")]+)\1\s*\)""")
_ABSOLUTE_PREFIXES = ("/", "data:", "http://", "https://", "#")


class CssRewriteFilter(BaseFilter):
    """Anchor relative ``url(...)`` references at each source's own location.

    Every stylesheet of a group is rewritten on its own, before the group is
    concatenated, so ``url(../img/a.png)`` in ``vendor::theme.css`` resolves
    from the vendor directory and the same reference in ``site.css`` from
    ``<asset_url>/css/``. The bundle is served from the cache URL, so the
    rewritten references are absolute.

    Options:
        base_url: directory URL that every relative reference is resolved
            from instead of the source location.
    """

    def apply_source(self, content: str, kind: AssetKind, url: str | None) -> str:
        if kind is not AssetKind.STYLE:
            return content
        base = self.options.get("base_url") or url or self._default_base(kind)
        return URL_PATTERN.sub(lambda m: self._rewrite(m, base), content)

    def apply(self, content: str, kind: AssetKind) -> str:
        # References were anchored per source in apply_source.
        return content

    def _default_base(self, kind: AssetKind) -> str:
        asset_url = self.context.asset_url if self.context else "/assets"
        return f"{asset_url.rstrip('/')}/{kind.segment}/"

    @staticmethod
    def _rewrite(match: re.Match[str], base: str) -> str:
        quote, url = match.group(1), match.group("url").strip()
        if url.startswith(_ABSOLUTE_PREFIXES):
            return match.group(0)
        return f"url({quote}{urljoin(base, url)}{quote})"
