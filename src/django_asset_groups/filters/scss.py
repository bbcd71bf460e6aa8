"""SCSS compiler filter running the Sass CLI."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Any

from ..conf import get_setting
from ..exceptions import BuildFailureError
from ..kinds import AssetKind
from .base import BaseFilter, FilterContext

logger = logging.getLogger(__name__)


class ScssFilter(BaseFilter):
    """Compile SCSS to CSS with the ``sass`` command line tool.

    The image and script layout is exposed to stylesheets as Sass variables
    (``$images-dir``, ``$generated-images-dir``, ``$http-images-path``,
    ``$http-generated-images-path``, ``$http-javascripts-path``) so image
    helpers can build URLs without hard-coding them.

    Options:
        sass_path: explicit binary, overrides ``SASS_PATH``.
        load_paths: extra ``--load-path`` directories.
        style: ``expanded`` (default) or ``compressed``.
        http_path: public prefix for images and scripts (default ``/assets/``).

    Requirements:
        - Dart Sass CLI on PATH or configured via ``SASS_PATH``
    """

    def __init__(self, options: dict[str, Any] | None = None, context: FilterContext | None = None) -> None:
        super().__init__(options, context)
        asset_path = Path(context.asset_path) if context else Path("assets")
        cache_path = Path(context.cache_path) if context else asset_path / "cache"
        http_path = self.options.get("http_path", "/assets/")

        self.images_dir = str(asset_path / "img")
        self.generated_images_dir = str(cache_path / "img")
        self.javascripts_dir = str(asset_path / "js")
        self.http_images_path = f"{http_path.rstrip('/')}/img"
        self.http_generated_images_path = f"{http_path.rstrip('/')}/cache/img"
        self.http_javascripts_path = f"{http_path.rstrip('/')}/js"
        self.load_paths = [str(asset_path / "css"), *self.options.get("load_paths", [])]

    def apply(self, content: str, kind: AssetKind) -> str:
        Path(self.generated_images_dir).mkdir(parents=True, exist_ok=True)

        result = subprocess.run(  # noqa: S603
            self._build_command(self._get_cli_path()),
            input=self._build_input(content),
            capture_output=True,
            text=True,
            timeout=self.context.timeout if self.context else 30,
        )
        if result.returncode != 0:
            raise BuildFailureError(f"Sass compilation failed: {result.stderr}")
        return result.stdout

    def _get_cli_path(self) -> str:
        """Resolve the Sass binary: option -> SASS_PATH -> PATH -> "sass"."""
        configured: str | None = self.options.get("sass_path") or get_setting("SASS_PATH")
        if configured:
            return configured
        return shutil.which("sass") or "sass"

    def _build_command(self, cli_path: str) -> list[str]:
        cmd = [
            cli_path,
            "--stdin",
            "--no-source-map",
            f"--style={self.options.get('style', 'expanded')}",
        ]
        for load_path in self.load_paths:
            cmd.append(f"--load-path={load_path}")
        return cmd

    def _build_input(self, content: str) -> str:
        variables = {
            "images-dir": self.images_dir,
            "generated-images-dir": self.generated_images_dir,
            "javascripts-dir": self.javascripts_dir,
            "http-images-path": self.http_images_path,
            "http-generated-images-path": self.http_generated_images_path,
            "http-javascripts-path": self.http_javascripts_path,
        }
        header = "".join(f'${name}: "{value}" !default;\n' for name, value in variables.items())
        return f"{header}{content}"
