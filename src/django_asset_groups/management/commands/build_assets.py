"""Management command to pre-build filtered asset group artifacts."""

from __future__ import annotations

import logging

from django.core.management.base import BaseCommand, CommandError, CommandParser

from django_asset_groups.exceptions import AssetGroupsError

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Build the cached bundles of every enabled filtered asset group."

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--group",
            dest="group_name",
            help="Only build the group with this name.",
        )
        parser.add_argument(
            "--kind",
            choices=["style", "script", "css", "js"],
            help="Only build groups of this kind.",
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Rebuild artifacts that already exist in the cache.",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be built without actually building.",
        )

    def handle(self, **options: object) -> None:
        from django_asset_groups.manager import AssetManager

        group_name = options.get("group_name")
        kind = options.get("kind")
        force = bool(options.get("force"))
        dry_run = options.get("dry_run")

        try:
            manager = AssetManager.from_settings()
        except AssetGroupsError as e:
            raise CommandError(f"Invalid ASSET_GROUPS configuration: {e}") from e

        targets = [
            (current, group)
            for current, group in manager.filtered_groups(kind)
            if group.enabled and (group_name is None or group.name == group_name)
        ]
        self.stdout.write(f"Building {len(targets)} asset group(s)...")

        built = 0
        errors = 0
        for current, group in targets:
            label = f"{current.value}:{group.name}"
            if dry_run:
                self.stdout.write(f"  [DRY RUN] Would build: {label}")
                built += 1
                continue

            try:
                url = manager.renderer.build(group, current, force=force)
                self.stdout.write(f"  Built: {label} -> {url}")
                built += 1
            except AssetGroupsError:
                logger.exception("Failed to build asset group %s", label)
                self.stderr.write(f"  ERROR: {label}")
                errors += 1

        prefix = "[DRY RUN] " if dry_run else ""
        self.stdout.write(
            self.style.SUCCESS(f"\n{prefix}Done. Built: {built}, Errors: {errors}")
        )
