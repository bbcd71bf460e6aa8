"""Pytest fixtures for django-asset-groups tests."""

from unittest import mock

import pytest

from django_asset_groups.cache import BuildCache
from django_asset_groups.manager import AssetManager
from django_asset_groups.sources import fetch_remote


@pytest.fixture
def asset_dir(tmp_path):
    """Asset tree with two stylesheets and two scripts."""
    root = tmp_path / "assets"
    (root / "css").mkdir(parents=True)
    (root / "js").mkdir()
    (root / "css" / "a.css").write_text("a { color: red; }\n", encoding="utf-8")
    (root / "css" / "b.css").write_text("b {  margin : 0 ; }\n", encoding="utf-8")
    (root / "js" / "app.js").write_text("var app = 1;\n", encoding="utf-8")
    (root / "js" / "util.js").write_text("var util = 2;\n", encoding="utf-8")
    return root


@pytest.fixture
def make_config(asset_dir, tmp_path):
    """Factory for manager configs rooted at the temporary asset tree."""

    def factory(groups, **extra):
        config = {
            "groups": groups,
            "paths": {},
            "assetPath": str(asset_dir),
            "assetUrl": "/assets",
            "cachePath": str(tmp_path / "cache"),
            "documentRoot": str(tmp_path),
            "debug": False,
        }
        config.update(extra)
        return config

    return factory


@pytest.fixture
def mock_storage():
    """Mock storage backend holding no artifacts."""
    storage = mock.Mock()
    storage.exists.return_value = False
    storage.save.side_effect = lambda path, content: f"/assets/cache/{path}"
    storage.url.side_effect = lambda path: f"/assets/cache/{path}"
    return storage


@pytest.fixture
def make_manager(make_config, mock_storage):
    """Factory for managers writing to ``mock_storage``."""

    def factory(groups, **extra):
        return AssetManager(make_config(groups, **extra), build_cache=BuildCache(mock_storage))

    return factory


@pytest.fixture
def no_retry_sleep():
    """Make tenacity retries of remote fetches immediate."""
    with mock.patch.object(fetch_remote.retry, "sleep", lambda seconds: None):
        yield
