"""Group declarations parsed from the ``groups`` configuration mapping."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .exceptions import ConfigurationError
from .kinds import AssetKind


@dataclass
class GroupSpec:
    """One named group of a single kind.

    ``enabled`` is the only field mutated after construction.
    """

    name: str
    files: list[Any] = field(default_factory=list)
    filters: list[str] = field(default_factory=list)
    enabled: bool = True

    @classmethod
    def from_config(cls, name: str, raw: Any) -> GroupSpec:
        if raw is None:
            raw = {}
        if not isinstance(raw, Mapping):
            raise ConfigurationError(
                f"Group {name!r} must be a mapping, got {type(raw).__name__}"
            )
        files = raw.get("files") or []
        filters = raw.get("filters") or []
        if isinstance(files, str) or not isinstance(files, (list, tuple)):
            raise ConfigurationError(f"Group {name!r}: 'files' must be a list")
        if isinstance(filters, str) or not isinstance(filters, (list, tuple)):
            raise ConfigurationError(f"Group {name!r}: 'filters' must be a list")
        return cls(
            name=name,
            files=list(files),
            filters=[str(f) for f in filters],
            enabled=raw.get("enabled", True) is not False,
        )


def parse_groups(raw: Mapping[str, Any] | None) -> dict[AssetKind, dict[str, GroupSpec]]:
    """Parse ``{kind: {name: spec}}`` into GroupSpec tables keyed by kind.

    Kinds are returned in style, script order regardless of declaration
    order; groups keep their declaration order.

    Raises:
        InvalidKindError: If a top-level key names neither kind.
        ConfigurationError: If a group declaration is malformed.
    """
    parsed: dict[AssetKind, dict[str, GroupSpec]] = {}
    if not raw:
        return parsed

    declared: dict[AssetKind, Any] = {}
    for key, groups in raw.items():
        kind = AssetKind.parse(key)
        if kind in declared:
            raise ConfigurationError(f"Kind {kind.value!r} is declared twice")
        declared[kind] = groups

    for kind in AssetKind:
        if kind not in declared:
            continue
        groups = declared[kind] or {}
        if not isinstance(groups, Mapping):
            raise ConfigurationError(f"Groups for {kind.value!r} must be a mapping")
        parsed[kind] = {
            name: GroupSpec.from_config(name, spec) for name, spec in groups.items()
        }
    return parsed
