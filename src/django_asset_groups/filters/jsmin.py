"""JS compressor filter: terser when available, rjsmin otherwise."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

import rjsmin

from ..conf import get_document_root, get_setting
from ..kinds import AssetKind
from .base import BaseFilter

logger = logging.getLogger(__name__)


class JsCompressorFilter(BaseFilter):
    """Minify scripts with terser (preferred) or rjsmin (fallback).

    Options:
        terser_path: explicit terser binary, overrides ``TERSER_PATH``.
        terser_options: CLI options, overrides ``TERSER_OPTIONS``.
        use_terser: set to False to always use rjsmin.
    """

    def apply(self, content: str, kind: AssetKind) -> str:
        terser_path = self._find_terser() if self.options.get("use_terser", True) else None
        if terser_path is not None:
            try:
                result = subprocess.run(  # noqa: S603
                    [terser_path, *self._terser_options()],
                    input=content,
                    capture_output=True,
                    text=True,
                    timeout=self.context.timeout if self.context else 30,
                    check=True,
                )
                return result.stdout
            except (subprocess.CalledProcessError, OSError) as e:
                logger.warning("terser failed: %s. Falling back to rjsmin.", e)

        return rjsmin.jsmin(content)  # type: ignore[no-any-return]

    def _terser_options(self) -> list[str]:
        options = self.options.get("terser_options")
        if options is None:
            options = get_setting("TERSER_OPTIONS")
        return list(options)

    def _find_terser(self) -> str | None:
        """Find the terser CLI binary.

        Search order: filter option -> TERSER_PATH setting ->
        node_modules/.bin/terser under the document root -> PATH.
        """
        explicit: str | None = self.options.get("terser_path") or get_setting("TERSER_PATH")
        if explicit:
            return explicit
        local = Path(get_document_root()) / "node_modules" / ".bin" / "terser"
        if local.exists():
            return str(local)
        return shutil.which("terser")
