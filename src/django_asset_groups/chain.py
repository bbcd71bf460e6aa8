"""Ordered filter chains and the artifact names derived from them."""

from __future__ import annotations

import hashlib
import json
import logging
import subprocess
from collections.abc import Callable, Sequence
from typing import Any

from .exceptions import (
    AssetGroupsError,
    BuildFailureError,
    BuildTimeoutError,
    UnknownFilterError,
)
from .filters.registry import FilterRegistry
from .kinds import AssetKind

logger = logging.getLogger(__name__)

DEBUG_SKIP_MARKER = "?"
DEFAULT_HASH_LENGTH = 12


def effective_filters(names: Sequence[str], debug: bool) -> list[str]:
    """Lowercase filter names and apply the debug-skip marker.

    ``"?name"`` is dropped in debug mode and kept as ``"name"`` otherwise.
    """
    effective = []
    for name in names:
        name = name.strip().lower()
        if name.startswith(DEBUG_SKIP_MARKER):
            if debug:
                continue
            name = name[len(DEBUG_SKIP_MARKER):]
        effective.append(name)
    return effective


class FilterChain:
    """The filters of one group, in declared order.

    The chain's identity names the generated artifact. It is derived from
    the declared file references, the effective filter names and each
    filter's option blob: editing a source file in place keeps the same
    name and the cached artifact is served until files, filters or filter
    options change.
    """

    def __init__(
        self,
        names: Sequence[str],
        registry: FilterRegistry,
        debug: bool = False,
        hash_length: int = DEFAULT_HASH_LENGTH,
    ) -> None:
        self.declared = list(names)
        self.names = effective_filters(names, debug)
        self.registry = registry
        self.hash_length = hash_length

    def validate(self) -> None:
        """Check every non-skipped filter is registered, without building it.

        Raises:
            UnknownFilterError: If a non-skipped filter is not registered.
        """
        for name in self.names:
            if name not in self.registry:
                raise UnknownFilterError(f"No filter registered as {name!r}")

    def identity(self, files: Sequence[Any], kind: AssetKind) -> str:
        payload = json.dumps(
            {
                "files": [_ref_key(ref) for ref in files],
                "filters": self.names,
                "options": [self.registry.options_for(name) for name in self.names],
                "output": f"*.{kind.extension}",
            },
            sort_keys=True,
            default=str,
        )
        return hashlib.sha1(payload.encode("utf-8")).hexdigest()[: self.hash_length]  # noqa: S324

    def target_path(self, files: Sequence[Any], kind: AssetKind, output: str | None = None) -> str:
        """Substitute the identity into the output template (``*.css``/``*.js``)."""
        template = output or f"*.{kind.extension}"
        return template.replace("*", self.identity(files, kind))

    def apply_source(self, content: str, kind: AssetKind, url: str | None) -> str:
        """Run one source through every filter's per-source step.

        ``url`` is where the source is published, or None when unknown.
        """
        for name in self.names:
            flt = self.registry.get(name)
            content = self._run(name, flt.apply_source, content, kind, url)
        return content

    def apply(self, content: str, kind: AssetKind) -> str:
        """Run content through every filter in order.

        Raises:
            UnknownFilterError: If a filter is not registered.
            BuildTimeoutError: If an external filter process times out.
            BuildFailureError: If a filter fails.
        """
        for name in self.names:
            flt = self.registry.get(name)
            content = self._run(name, flt.apply, content, kind)
        return content

    @staticmethod
    def _run(name: str, step: Callable[..., str], *args: Any) -> str:
        try:
            return step(*args)
        except AssetGroupsError:
            raise
        except subprocess.TimeoutExpired as e:
            logger.error("Filter %s timed out after %ss", name, e.timeout)
            raise BuildTimeoutError(f"Filter {name!r} timed out") from e
        except Exception as e:
            logger.error("Filter %s failed: %s", name, e)
            raise BuildFailureError(f"Filter {name!r} failed: {e}") from e


def _ref_key(ref: Any) -> str:
    if isinstance(ref, (list, tuple)):
        return str(ref[0]) if ref else ""
    return str(ref)
