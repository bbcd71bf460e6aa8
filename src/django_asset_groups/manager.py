"""The AssetManager facade: group configuration plus per-pass render state."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any

from .cache import BuildCache
from .chain import DEFAULT_HASH_LENGTH
from .conf import DEFAULTS, get_manager_config
from .filters.base import FilterContext
from .filters.registry import FilterRegistry
from .groups import GroupSpec, parse_groups
from .kinds import AssetKind
from .paths import PathResolver
from .renderer import GroupRenderer
from .sources import DEFAULT_FETCH_TIMEOUT_SECONDS
from .storage.base import BaseAssetStorage
from .storage.local import LocalFileStorage
from .utils import get_storage

logger = logging.getLogger(__name__)

_OPTION_KEYS = frozenset(
    {
        "groups",
        "paths",
        "assetPath",
        "assetUrl",
        "cachePath",
        "cacheUrl",
        "documentRoot",
        "debug",
        "filters",
        "filterOptions",
        "hashLength",
        "fetchTimeout",
        "filterTimeout",
    }
)


class AssetManager:
    """Render the tags of enabled asset groups, each at most once.

    Configuration::

        {
            "groups": {
                "style": {"site": {"files": ["a.css", "b.css"], "filters": ["csscompressor"]}},
                "script": {"site": {"files": ["vendor::jquery.js", "app.js"]}},
            },
            "paths": {"vendor": {"path": "/static/vendor/", "script_dir": "js/"}},
            "assetPath": "/srv/site/assets",
            "assetUrl": "/assets",
            "cachePath": "/srv/site/assets/cache",
            "debug": False,
        }

    Any other top-level key that matches a filter name is passed to that
    filter as its option blob.

    An instance tracks which groups it already rendered and is not safe to
    share between concurrent render passes; create one per request (see
    :class:`~django_asset_groups.middleware.AssetGroupsMiddleware`) and share
    the registry and build cache instead.

    Raises:
        InvalidKindError: If ``groups`` has a key other than style/script.
        ConfigurationError: If a group declaration is malformed.
        UnknownFilterError: If a group names an unregistered filter.
    """

    def __init__(
        self,
        config: Mapping[str, Any] | None = None,
        *,
        storage: BaseAssetStorage | None = None,
        registry: FilterRegistry | None = None,
        build_cache: BuildCache | None = None,
    ) -> None:
        config = dict(config or {})
        self.config = config
        self.debug = bool(config.get("debug", False))

        self.asset_path, self.asset_url, self.cache_path, self.cache_url = _layout(config)

        self.groups: dict[AssetKind, dict[str, GroupSpec]] = parse_groups(config.get("groups"))

        self.resolver = PathResolver(
            config.get("paths"),
            asset_url=self.asset_url,
            asset_path=self.asset_path,
            document_root=config.get("documentRoot"),
            fetch_timeout=config.get("fetchTimeout") or DEFAULT_FETCH_TIMEOUT_SECONDS,
        )

        self.registry = registry if registry is not None else create_registry(config)

        if build_cache is None:
            build_cache = BuildCache(
                storage or LocalFileStorage(self.cache_path, self.cache_url)
            )
        self.build_cache = build_cache

        self.renderer = GroupRenderer(
            self.resolver,
            self.registry,
            self.build_cache,
            debug=self.debug,
            hash_length=config.get("hashLength") or DEFAULT_HASH_LENGTH,
        )
        self.validate()

    @classmethod
    def from_settings(cls, **kwargs: Any) -> AssetManager:
        """Build a manager from the ``ASSET_GROUPS`` Django setting.

        Keyword arguments are passed through to the constructor, which lets
        callers share a registry and build cache between managers.
        """
        if "storage" not in kwargs and "build_cache" not in kwargs:
            kwargs["storage"] = get_storage()
        return cls(get_manager_config(), **kwargs)

    def validate(self) -> None:
        """Check every group's filters against the registry.

        Raises:
            UnknownFilterError: If a non-skipped filter is not registered.
        """
        for groups in self.groups.values():
            for group in groups.values():
                self.renderer.chain_for(group).validate()

    def enable(self, group_name: str, kind: Any = None) -> AssetManager:
        """Enable a group for future render calls.

        Args:
            group_name: The group to enable.
            kind: "style", "script" (or "css"/"js"), or None for both.

        Returns:
            The manager itself, for chaining.

        Raises:
            InvalidKindError: If ``kind`` is not None and names neither kind.
        """
        self._set_enabled(group_name, kind, True)
        return self

    def disable(self, group_name: str, kind: Any = None) -> AssetManager:
        """Disable a group; it renders as the empty string from now on.

        Groups already rendered in this pass are not affected retroactively.
        """
        self._set_enabled(group_name, kind, False)
        return self

    def render(self, group_name: str | None = None, kind: Any = None) -> str:
        """Return the tags of the requested enabled groups.

        Passing None for ``group_name`` renders every group; passing None for
        ``kind`` renders stylesheets then scripts. Every group is rendered at
        most once per pass: later calls for it return "".

        Raises:
            InvalidKindError: If ``kind`` is not None and names neither kind.
            ConfigurationError: If a file reference uses an unknown alias.
            MissingFilesError: If a filtered group has no files.
            UnknownFilterError: If a filter is not registered.
            BuildFailureError: If building an artifact fails.
        """
        kinds = self._kinds(kind)
        if not self.groups:
            return ""

        html = ""
        for current in kinds:
            groups = self.groups.get(current)
            if not groups:
                continue
            if group_name is not None:
                group = groups.get(group_name)
                if group is None:
                    logger.debug("No %s group named %s", current.value, group_name)
                    continue
                html += self.renderer.render(group, current)
                continue
            for group in groups.values():
                html += self.renderer.render(group, current)
        return html

    def render_css(self, group_name: str | None = None) -> str:
        return self.render(group_name, AssetKind.STYLE)

    def render_js(self, group_name: str | None = None) -> str:
        return self.render(group_name, AssetKind.SCRIPT)

    def is_rendered(self, group_name: str, kind: Any) -> bool:
        return self.renderer.is_rendered(AssetKind.parse(kind), group_name)

    def reset(self) -> None:
        """Forget which groups were rendered, starting a new render pass."""
        self.renderer.reset()

    def filtered_groups(self, kind: Any = None) -> list[tuple[AssetKind, GroupSpec]]:
        return [
            (current, group)
            for current in self._kinds(kind)
            for group in self.groups.get(current, {}).values()
            if group.filters
        ]

    def _set_enabled(self, group_name: str, kind: Any, enabled: bool) -> None:
        for current in self._kinds(kind):
            groups = self.groups.setdefault(current, {})
            group = groups.get(group_name)
            if group is None:
                group = groups[group_name] = GroupSpec(name=group_name)
            group.enabled = enabled

    @staticmethod
    def _kinds(kind: Any) -> list[AssetKind]:
        if kind is None:
            return list(AssetKind)
        return [AssetKind.parse(kind)]


def create_registry(config: Mapping[str, Any]) -> FilterRegistry:
    """Build the filter registry described by a manager configuration."""
    asset_path, asset_url, cache_path, cache_url = _layout(config)
    return FilterRegistry(
        config.get("filters") or DEFAULTS["FILTERS"],
        _filter_options(config),
        FilterContext(
            asset_path=asset_path,
            asset_url=asset_url,
            cache_path=cache_path,
            cache_url=cache_url,
            timeout=config.get("filterTimeout") or DEFAULTS["FILTER_TIMEOUT"],
            debug=bool(config.get("debug", False)),
        ),
    )


def _layout(config: Mapping[str, Any]) -> tuple[str, str, str, str]:
    asset_path: str = config.get("assetPath") or os.path.realpath("./assets")
    asset_url: str = config.get("assetUrl") or "/assets"
    cache_path: str = config.get("cachePath") or f"{asset_path}/cache"
    cache_url: str = config.get("cacheUrl") or DEFAULTS["CACHE_URL"]
    return asset_path, asset_url, cache_path, cache_url


def _filter_options(config: Mapping[str, Any]) -> dict[str, Any]:
    """Option blobs by filter name: top-level keys, overridden by ``filterOptions``."""
    options = {
        key.lower(): value
        for key, value in config.items()
        if key not in _OPTION_KEYS and isinstance(value, Mapping)
    }
    options.update({k.lower(): v for k, v in (config.get("filterOptions") or {}).items()})
    return options
