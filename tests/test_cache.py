"""Tests for django_asset_groups.cache.BuildCache."""

import threading
import time
from unittest import mock

import pytest

from django_asset_groups.cache import BuildCache
from django_asset_groups.chain import FilterChain
from django_asset_groups.exceptions import BuildFailureError
from django_asset_groups.filters.base import BaseFilter
from django_asset_groups.filters.registry import FilterRegistry
from django_asset_groups.kinds import AssetKind
from django_asset_groups.sources import LocalFile
from django_asset_groups.storage.local import LocalFileStorage


class _Upper(BaseFilter):
    def apply(self, content, kind):
        return content.upper()


@pytest.fixture
def chain():
    return FilterChain(["upper"], FilterRegistry({"upper": _Upper}))


@pytest.fixture
def sources(tmp_path):
    (tmp_path / "a.css").write_text("a{}", encoding="utf-8")
    (tmp_path / "b.css").write_text("b{}", encoding="utf-8")
    return [LocalFile(str(tmp_path / "a.css")), LocalFile(str(tmp_path / "b.css"))]


class TestGetOrBuild:
    def test_miss_concatenates_filters_and_saves(self, mock_storage, sources, chain):
        """A miss builds the artifact once.

        Purpose: Verify sources are concatenated in order, filtered and
            written through the storage backend.
        Category: Normal case
        Target: BuildCache.get_or_build(target_path, sources, chain, kind)
        Technique: Statement coverage (C0)
        Test data: Two local stylesheets and an upper-casing filter
        """
        cache = BuildCache(mock_storage)

        url = cache.get_or_build("abc.css", sources, chain, AssetKind.STYLE)

        assert url == "/assets/cache/abc.css"
        mock_storage.save.assert_called_once_with("abc.css", "A{}\nB{}")

    def test_second_call_is_served_from_record(self, mock_storage, sources, chain):
        cache = BuildCache(mock_storage)
        cache.get_or_build("abc.css", sources, chain, AssetKind.STYLE)

        url = cache.get_or_build("abc.css", sources, chain, AssetKind.STYLE)

        assert url == "/assets/cache/abc.css"
        assert mock_storage.save.call_count == 1
        assert cache.is_built("abc.css") is True

    def test_existing_artifact_is_not_rebuilt(self, mock_storage, chain):
        """An artifact written by another process is a hit.

        Purpose: Verify no freshness check happens on a hit: the sources are
            not even read.
        Category: Normal case
        Target: BuildCache.get_or_build
        Technique: Equivalence partitioning
        Test data: Storage reporting the artifact exists, unreadable source
        """
        mock_storage.exists.return_value = True
        source = mock.Mock()
        cache = BuildCache(mock_storage)

        url = cache.get_or_build("abc.js", [source], chain, AssetKind.SCRIPT)

        assert url == "/assets/cache/abc.js"
        source.load.assert_not_called()
        mock_storage.save.assert_not_called()

    def test_force_rebuilds(self, mock_storage, sources, chain):
        mock_storage.exists.return_value = True
        cache = BuildCache(mock_storage)

        cache.get_or_build("abc.css", sources, chain, AssetKind.STYLE, force=True)
        cache.get_or_build("abc.css", sources, chain, AssetKind.STYLE, force=True)

        assert mock_storage.save.call_count == 2

    def test_failed_build_is_not_recorded(self, mock_storage, tmp_path, chain):
        cache = BuildCache(mock_storage)
        missing = [LocalFile(str(tmp_path / "missing.css"))]

        with pytest.raises(BuildFailureError):
            cache.get_or_build("abc.css", missing, chain, AssetKind.STYLE)

        assert cache.is_built("abc.css") is False
        mock_storage.save.assert_not_called()

    def test_writes_to_disk_with_local_storage(self, tmp_path, sources, chain):
        cache = BuildCache(LocalFileStorage(str(tmp_path / "cache"), "/assets/cache/"))

        url = cache.get_or_build("abc.css", sources, chain, AssetKind.STYLE)

        assert url == "/assets/cache/abc.css"
        assert (tmp_path / "cache" / "abc.css").read_text(encoding="utf-8") == "A{}\nB{}"


class TestConcurrentBuilds:
    def test_concurrent_requests_build_once(self, mock_storage, chain):
        """Concurrent builds of one target collapse into a single build.

        Purpose: Verify the per-target lock makes waiting callers reuse the
            first build.
        Category: Normal case
        Target: BuildCache.get_or_build
        Technique: State transition
        Test data: Eight threads requesting the same target, slow source
        """
        source = mock.Mock()
        source.describe.return_value = "slow"

        def slow_load():
            time.sleep(0.05)
            return "x"

        source.load.side_effect = slow_load
        cache = BuildCache(mock_storage)
        results = []

        def worker():
            results.append(cache.get_or_build("same.js", [source], chain, AssetKind.SCRIPT))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results == ["/assets/cache/same.js"] * 8
        assert source.load.call_count == 1
        assert mock_storage.save.call_count == 1
