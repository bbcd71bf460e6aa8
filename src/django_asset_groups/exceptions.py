"""Exceptions raised while configuring, rendering and building asset groups."""

from __future__ import annotations

from django.core.exceptions import ImproperlyConfigured


class AssetGroupsError(Exception):
    """Base class for all django-asset-groups errors."""


class InvalidKindError(AssetGroupsError, ValueError):
    """Raised when a kind other than style/script (or css/js) is supplied."""


class ConfigurationError(AssetGroupsError, ImproperlyConfigured):
    """Raised when the groups or paths configuration cannot be honoured."""


class MissingFilesError(AssetGroupsError):
    """Raised when a filtered group has no files to build from."""


class UnknownFilterError(AssetGroupsError):
    """Raised when a filter name has no registered implementation."""


class BuildFailureError(AssetGroupsError):
    """Raised when loading a source or running a filter fails."""


class BuildTimeoutError(BuildFailureError):
    """Raised when a remote fetch or external filter process times out."""
