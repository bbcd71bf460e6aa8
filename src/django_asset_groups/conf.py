"""Configuration and settings for django-asset-groups."""

from pathlib import Path
from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    # Group and alias declarations
    "GROUPS": {},
    "PATHS": {},
    # Filesystem and URL roots
    "ASSET_PATH": None,
    "ASSET_URL": "/assets",
    "CACHE_PATH": None,
    "CACHE_URL": "/assets/cache/",
    "DOCUMENT_ROOT": None,
    # None follows Django's DEBUG
    "DEBUG": None,
    # Storage settings
    "STORAGE_BACKEND": "django_asset_groups.storage.local.LocalFileStorage",
    "STORAGE_PREFIX": "asset-cache/",
    # Filter registry: lowercased name -> dotted class path
    "FILTERS": {
        "csscompressor": "django_asset_groups.filters.cssmin.CssCompressorFilter",
        "jscompressor": "django_asset_groups.filters.jsmin.JsCompressorFilter",
        "yuicss": "django_asset_groups.filters.cssmin.CssCompressorFilter",
        "yuijs": "django_asset_groups.filters.jsmin.JsCompressorFilter",
        "scss": "django_asset_groups.filters.scss.ScssFilter",
        "cssrewrite": "django_asset_groups.filters.cssrewrite.CssRewriteFilter",
    },
    # Per-filter option blobs, keyed by filter name
    "FILTER_OPTIONS": {},
    # Artifact naming
    "HASH_LENGTH": 12,
    # Timeouts (seconds)
    "FETCH_TIMEOUT": 20,
    "FILTER_TIMEOUT": 30,
    # External tools
    "TERSER_PATH": None,
    "TERSER_OPTIONS": ["-c", "-m"],
    "SASS_PATH": None,
    # Middleware tag injection
    "AUTO_INJECT": False,
}


_UNSET = object()


def get_setting(key: str, default: Any = _UNSET) -> Any:
    """Get a setting from the ASSET_GROUPS dict or return default."""
    user_settings: dict[str, Any] = getattr(settings, "ASSET_GROUPS", {})
    fallback = DEFAULTS.get(key) if default is _UNSET else default
    return user_settings.get(key, fallback)


def get_document_root() -> str:
    """Directory that project-relative asset paths are resolved against.

    Resolution order: ``DOCUMENT_ROOT`` setting -> Django ``BASE_DIR`` ->
    the current working directory.
    """
    configured: str | None = get_setting("DOCUMENT_ROOT")
    if configured:
        return str(configured)
    base_dir = getattr(settings, "BASE_DIR", None)
    if base_dir is not None:
        return str(base_dir)
    return str(Path.cwd())


def get_manager_config() -> dict[str, Any]:
    """Assemble an AssetManager configuration mapping from Django settings."""
    asset_path = get_setting("ASSET_PATH") or str(
        Path(get_document_root()) / "assets"
    )
    cache_path = get_setting("CACHE_PATH") or str(Path(asset_path) / "cache")
    debug = get_setting("DEBUG")
    if debug is None:
        debug = bool(getattr(settings, "DEBUG", False))

    return {
        "groups": get_setting("GROUPS"),
        "paths": get_setting("PATHS"),
        "assetPath": asset_path,
        "assetUrl": get_setting("ASSET_URL"),
        "cachePath": cache_path,
        "cacheUrl": get_setting("CACHE_URL"),
        "documentRoot": get_document_root(),
        "debug": debug,
        "filters": get_setting("FILTERS"),
        "filterOptions": get_setting("FILTER_OPTIONS"),
        "hashLength": get_setting("HASH_LENGTH"),
        "fetchTimeout": get_setting("FETCH_TIMEOUT"),
        "filterTimeout": get_setting("FILTER_TIMEOUT"),
    }
