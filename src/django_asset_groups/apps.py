"""Django app configuration for django-asset-groups."""

from django.apps import AppConfig


class AssetGroupsConfig(AppConfig):
    name = "django_asset_groups"
    verbose_name = "Asset Groups"

    def ready(self) -> None:
        from . import checks  # noqa: F401
