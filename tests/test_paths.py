"""Tests for django_asset_groups.paths.

## Decision table: DT-RESOLVE

| ID  | Reference                 | paths entry                                  | kind   | Expected                                         |
|-----|---------------------------|----------------------------------------------|--------|--------------------------------------------------|
| DT1 | app.js                    | -                                            | script | /assets/js/app.js                                |
| DT2 | site.css                  | -                                            | style  | /assets/css/site.css                             |
| DT3 | fonts::Open+Sans          | "https://fonts.example.com/css?family="      | style  | https://fonts.example.com/css?family=Open+Sans   |
| DT4 | google::?family=Lato      | "https://fonts.googleapis.com/"              | style  | https://fonts.googleapis.com/css?family=Lato     |
| DT5 | vendor::jquery.js         | "/static/vendor/"                            | script | /static/vendor/js/jquery.js                      |
| DT6 | vendor::jquery.js         | {path: "/static/vendor/"}                    | script | /static/vendor/js/jquery.js                      |
| DT7 | vendor::jquery.js         | {path: "/v/", script_dir: "javascripts"}     | script | /v/javascripts/jquery.js                         |
| DT8 | vendor::x.css             | {path: "/v/", css_dir: "stylesheets/"}       | style  | /v/stylesheets/x.css                             |
| DT9 | vendor::x.css             | {path: "/v/", style_dir: ""}                 | style  | /v/x.css                                         |
"""

import os
from pathlib import Path

import pytest

from django_asset_groups.exceptions import ConfigurationError
from django_asset_groups.kinds import AssetKind
from django_asset_groups.paths import PathResolver, is_remote
from django_asset_groups.sources import LocalFile, LocalGlob, RemoteResource


class TestResolveDecisionTable:
    @pytest.mark.parametrize(
        "ref,alias_entry,kind,expected",
        [
            pytest.param("app.js", None, AssetKind.SCRIPT, "/assets/js/app.js", id="DT1-plain-script"),
            pytest.param("site.css", None, AssetKind.STYLE, "/assets/css/site.css", id="DT2-plain-style"),
            pytest.param(
                "fonts::Open+Sans",
                "https://fonts.example.com/css?family=",
                AssetKind.STYLE,
                "https://fonts.example.com/css?family=Open+Sans",
                id="DT3-root-with-query-drops-kind-segment",
            ),
            pytest.param(
                "fonts::?family=Lato",
                "https://fonts.googleapis.com/",
                AssetKind.STYLE,
                "https://fonts.googleapis.com/css?family=Lato",
                id="DT4-query-marker-strips-separator",
            ),
            pytest.param(
                "fonts::jquery.js", "/static/vendor/", AssetKind.SCRIPT,
                "/static/vendor/js/jquery.js", id="DT5-bare-alias",
            ),
            pytest.param(
                "fonts::jquery.js", {"path": "/static/vendor/"}, AssetKind.SCRIPT,
                "/static/vendor/js/jquery.js", id="DT6-structured-default-dir",
            ),
            pytest.param(
                "fonts::jquery.js", {"path": "/v/", "script_dir": "javascripts"}, AssetKind.SCRIPT,
                "/v/javascripts/jquery.js", id="DT7-structured-script-dir",
            ),
            pytest.param(
                "fonts::x.css", {"path": "/v/", "css_dir": "stylesheets/"}, AssetKind.STYLE,
                "/v/stylesheets/x.css", id="DT8-legacy-css-dir",
            ),
            pytest.param(
                "fonts::x.css", {"path": "/v/", "style_dir": ""}, AssetKind.STYLE,
                "/v/x.css", id="DT9-empty-style-dir",
            ),
        ],
    )
    def test_resolve(self, ref, alias_entry, kind, expected):
        """DT-RESOLVE: file references resolve to URLs.

        Purpose: Verify unqualified and alias-qualified references resolve
            per the decision table.
        Category: Normal case
        Target: PathResolver.resolve(file_ref, kind)
        Technique: Decision table (DT-RESOLVE)
        Test data: DT1-DT9
        """
        paths = {"fonts": alias_entry} if alias_entry is not None else {}
        resolver = PathResolver(paths, asset_url="/assets")

        assert resolver.resolve(ref, kind) == expected


class TestResolveEdgeCases:
    def test_asset_url_trailing_slash_is_normalized(self):
        resolver = PathResolver(asset_url="/assets/")

        assert resolver.resolve("app.js", AssetKind.SCRIPT) == "/assets/js/app.js"

    def test_unknown_alias_raises(self):
        """An alias missing from paths raises ConfigurationError.

        Purpose: Verify local configuration errors fail fast.
        Category: Error case
        Target: PathResolver.resolve(file_ref, kind)
        Technique: Error guessing
        Test data: Reference to an undeclared alias
        """
        resolver = PathResolver({"vendor": "/v/"})

        with pytest.raises(ConfigurationError, match="'cdn'"):
            resolver.resolve("cdn::lib.js", AssetKind.SCRIPT)

    def test_longest_alias_wins(self):
        """Aliases that prefix each other resolve by longest match.

        Purpose: Verify the tie-break rule is independent of declaration order.
        Category: Edge case
        Target: PathResolver.resolve(file_ref, kind)
        Technique: Boundary value analysis
        Test data: Aliases "vendor" and "vendor::ui" declared in both orders
        """
        for paths in (
            {"vendor": "/v/", "vendor::ui": "/ui/"},
            {"vendor::ui": "/ui/", "vendor": "/v/"},
        ):
            resolver = PathResolver(paths)

            assert resolver.resolve("vendor::ui::button.js", AssetKind.SCRIPT) == "/ui/js/button.js"
            assert resolver.resolve("vendor::x.js", AssetKind.SCRIPT) == "/v/js/x.js"

    def test_structured_alias_without_path_raises(self):
        resolver = PathResolver({"vendor": {"script_dir": "js/"}})

        with pytest.raises(ConfigurationError, match="no 'path'"):
            resolver.resolve("vendor::x.js", AssetKind.SCRIPT)

    def test_list_reference_uses_first_element(self):
        resolver = PathResolver()

        assert resolver.resolve(["app.js", {"ignored": True}], AssetKind.SCRIPT) == "/assets/js/app.js"

    def test_full_url_is_returned_untouched(self):
        resolver = PathResolver()
        url = "https://cdn.example.com/lib.js"

        assert resolver.resolve(url, AssetKind.SCRIPT) == url

    @pytest.mark.parametrize("ref", [None, "", [], 42])
    def test_invalid_reference_raises(self, ref):
        with pytest.raises(ConfigurationError):
            PathResolver().resolve(ref, AssetKind.SCRIPT)

    def test_same_alias_serves_both_kinds(self):
        resolver = PathResolver({"vendor": {"path": "/v/", "style_dir": "styles/", "script_dir": "scripts/"}})

        assert resolver.resolve("vendor::a.css", AssetKind.STYLE) == "/v/styles/a.css"
        assert resolver.resolve("vendor::a.js", AssetKind.SCRIPT) == "/v/scripts/a.js"


class TestIsRemote:
    @pytest.mark.parametrize(
        "locator,expected",
        [
            ("//cdn.example.com/a.js", True),
            ("http://cdn.example.com/a.js", True),
            ("https://cdn.example.com/a.js", True),
            ("/assets/js/a.js", False),
            ("../shared/a.js", False),
            ("httpdocs/a.js", False),
        ],
    )
    def test_is_remote(self, locator, expected):
        assert is_remote(locator) is expected


class TestLocate:
    def test_unqualified_reference_is_local_file_under_asset_path(self, tmp_path):
        """Plain references read from the asset path, not the URL.

        Purpose: Verify the filesystem asset path and the public asset URL
            are kept apart.
        Category: Normal case
        Target: PathResolver.locate(file_ref, kind)
        Technique: Equivalence partitioning
        Test data: "app.js" with asset_path=tmp_path
        """
        resolver = PathResolver(asset_url="/public", asset_path=str(tmp_path))

        source = resolver.locate("app.js", AssetKind.SCRIPT)

        assert source == LocalFile(str(tmp_path / "js" / "app.js"))

    def test_wildcard_reference_is_glob(self, tmp_path):
        resolver = PathResolver(asset_path=str(tmp_path))

        source = resolver.locate("*.css", AssetKind.STYLE)

        assert source == LocalGlob(str(tmp_path / "css" / "*.css"))

    def test_remote_alias_is_remote_resource(self):
        resolver = PathResolver({"cdn": "https://cdn.example.com/"}, fetch_timeout=5)

        source = resolver.locate("cdn::lib.js", AssetKind.SCRIPT)

        assert source == RemoteResource("https://cdn.example.com/js/lib.js", timeout=5)

    def test_protocol_relative_alias_is_remote_resource(self):
        resolver = PathResolver({"cdn": "//cdn.example.com/"})

        source = resolver.locate("cdn::lib.js", AssetKind.SCRIPT)

        assert isinstance(source, RemoteResource)
        assert source.fetch_url == "https://cdn.example.com/js/lib.js"

    def test_parent_traversal_alias_is_anchored_at_document_root(self, tmp_path, monkeypatch):
        """``..`` aliases resolve from the document root, not the working directory.

        Purpose: Verify the located file does not depend on where the server
            process was started.
        Category: Edge case
        Target: PathResolver.locate(file_ref, kind)
        Technique: Error guessing (process started from another directory)
        Test data: Alias "../shared/" with the working directory set to /
        """
        project = tmp_path / "proj"
        project.mkdir()
        monkeypatch.chdir("/")
        resolver = PathResolver({"shared": "../shared/"}, document_root=str(project))

        source = resolver.locate("shared::x.css", AssetKind.STYLE)

        assert source == LocalFile(os.path.realpath(tmp_path / "shared" / "css" / "x.css"))
        assert source.url == "../shared/css/x.css"

    def test_located_sources_carry_public_url(self, tmp_path):
        resolver = PathResolver(
            {"vendor": "/static/vendor/"}, asset_path=str(tmp_path), document_root=str(tmp_path)
        )

        assert resolver.locate("a.css", AssetKind.STYLE).url == "/assets/css/a.css"
        assert resolver.locate("vendor::theme.css", AssetKind.STYLE).url == "/static/vendor/css/theme.css"

    def test_site_relative_alias_is_joined_with_document_root(self, tmp_path):
        resolver = PathResolver({"vendor": "/static/vendor/"}, document_root=str(tmp_path))

        source = resolver.locate("vendor::jquery.js", AssetKind.SCRIPT)

        assert source == LocalFile(str(Path(tmp_path) / "static" / "vendor" / "js" / "jquery.js"))

    def test_unknown_alias_raises(self):
        with pytest.raises(ConfigurationError):
            PathResolver().locate("nope::x.js", AssetKind.SCRIPT)
