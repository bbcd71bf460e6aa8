"""Named front-end asset groups with filtered, cached bundles for Django."""

from .exceptions import (
    AssetGroupsError,
    BuildFailureError,
    BuildTimeoutError,
    ConfigurationError,
    InvalidKindError,
    MissingFilesError,
    UnknownFilterError,
)
from .kinds import AssetKind
from .manager import AssetManager

__all__ = [
    "AssetGroupsError",
    "AssetKind",
    "AssetManager",
    "BuildFailureError",
    "BuildTimeoutError",
    "ConfigurationError",
    "InvalidKindError",
    "MissingFilesError",
    "UnknownFilterError",
]
