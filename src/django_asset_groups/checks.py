"""System checks validating the ASSET_GROUPS setting at startup."""

from __future__ import annotations

from typing import Any

from django.core import checks

from .exceptions import (
    ConfigurationError,
    InvalidKindError,
    UnknownFilterError,
)


@checks.register()
def check_asset_groups(app_configs: Any = None, **kwargs: Any) -> list[checks.CheckMessage]:
    """Report configuration errors before the first render.

    Builds a manager from settings (which validates kinds, group shapes and
    filter names) and resolves every file reference so unknown aliases show
    up in ``manage.py check``.
    """
    from .manager import AssetManager

    try:
        manager = AssetManager.from_settings()
    except InvalidKindError as e:
        return [checks.Error(str(e), id="asset_groups.E001")]
    except UnknownFilterError as e:
        return [checks.Error(str(e), id="asset_groups.E003")]
    except ConfigurationError as e:
        return [checks.Error(str(e), id="asset_groups.E002")]

    errors: list[checks.CheckMessage] = []
    for kind, groups in manager.groups.items():
        for group in groups.values():
            if group.filters and not group.files:
                errors.append(
                    checks.Warning(
                        f"{kind.value} group {group.name!r} has filters but no files",
                        hint="Add files or remove the filters.",
                        id="asset_groups.W001",
                    )
                )
            for ref in group.files:
                try:
                    manager.resolver.resolve(ref, kind)
                except ConfigurationError as e:
                    errors.append(
                        checks.Error(
                            str(e),
                            hint=f"Declare the alias in ASSET_GROUPS['PATHS'] ({kind.value} group {group.name!r}).",
                            id="asset_groups.E004",
                        )
                    )
    return errors
