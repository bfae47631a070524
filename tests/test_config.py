#!/usr/bin/env python3
"""Tests for the LoaderConfig module."""

import pytest

from amd_lookup.config import LoaderConfig


class TestFromMapping:
    """Tests for building a LoaderConfig from a raw mapping."""

    def test_declared_base_url_gets_trailing_slash(self):
        config = LoaderConfig.from_mapping({"baseUrl": "js"})
        assert config.base_url == "js/"
        assert config.base_url_declared

    def test_trailing_slash_not_doubled(self):
        assert LoaderConfig.from_mapping({"baseUrl": "js/"}).base_url == "js/"

    def test_repeated_trailing_slashes_collapsed(self):
        assert LoaderConfig.from_mapping({"baseUrl": "js//"}).base_url == "js/"
        assert LoaderConfig(base_url="js///").base_url == "js/"

    def test_root_base_url_kept(self):
        assert LoaderConfig(base_url="/").base_url == "/"

    def test_repeated_trailing_slashes_still_locate_prefix(self):
        config = LoaderConfig.from_mapping({"baseUrl": "js//"})
        assert config.prefix_for("/app/js/a.js") == "/app/"

    def test_base_url_defaults_to_config_dir(self):
        config = LoaderConfig.from_mapping({}, config_dir="project", default_base="project/js")
        assert config.base_url == "project/"
        assert not config.base_url_declared

    def test_base_url_defaults_to_default_base(self):
        config = LoaderConfig.from_mapping({}, default_base="js/subdir")
        assert config.base_url == "js/subdir/"

    def test_base_url_falls_back_to_current_directory(self):
        assert LoaderConfig.from_mapping(None).base_url == "./"
        assert LoaderConfig.from_mapping({}, default_base="").base_url == "./"

    def test_path_fallback_lists_use_first_entry(self):
        config = LoaderConfig.from_mapping(
            {"paths": {"jquery": ["vendor/jquery", "//cdn.example.com/jquery"]}}
        )
        assert config.paths == {"jquery": "vendor/jquery"}

    @pytest.mark.parametrize(
        "raw",
        [
            {"paths": "vendor", "map": ["*"]},
            {"paths": {"a": 1, "b": []}, "map": {"*": "b"}},
            {"baseUrl": 42},
        ],
    )
    def test_malformed_sections_treated_as_absent(self, raw):
        config = LoaderConfig.from_mapping(raw)
        assert config.paths == {}
        assert config.map == {}
        assert config.base_url == "./"

    def test_raw_mapping_not_modified(self):
        raw = {"paths": {"a": ["x", "y"]}}
        LoaderConfig.from_mapping(raw)
        assert raw == {"paths": {"a": ["x", "y"]}}


class TestPrefix:
    """Tests for locating the base URL inside a file path."""

    def test_prefix_before_base_url(self):
        config = LoaderConfig(base_url="js/")
        assert config.prefix_for("/home/app/js/a.js") == "/home/app/"

    def test_base_url_at_start(self):
        assert LoaderConfig(base_url="js/").prefix_for("js/a.js") == ""

    def test_base_url_must_start_a_segment(self):
        config = LoaderConfig(base_url="js/")
        assert config.prefix_for("projs/js/a.js") == "projs/"

    def test_first_occurrence_wins(self):
        config = LoaderConfig(base_url="js/")
        assert config.prefix_for("app/js/vendor/js/a.js") == "app/"

    def test_leading_slash_base_url(self):
        config = LoaderConfig(base_url="/js/")
        assert config.prefix_for("/home/app/js/a.js") == "/home/app"

    def test_missing_base_url_uses_config_dir_when_declared(self):
        config = LoaderConfig(base_url="js/", config_dir="project", base_url_declared=True)
        assert config.prefix_for("tests/test_app.js") == "project"

    def test_missing_base_url_without_config_dir(self):
        config = LoaderConfig(base_url="js/", base_url_declared=True)
        assert config.prefix_for("tests/test_app.js") == ""


class TestModuleId:
    """Tests for module ids of requesting files."""

    def test_strips_base_and_extension(self):
        config = LoaderConfig(base_url="js/")
        assert config.module_id("/app/js/subdir/a.js") == "subdir/a"

    def test_outside_base_url(self):
        assert LoaderConfig(base_url="js/").module_id("lib/a.js") is None


class TestAliasMatching:
    """Tests for paths and map matching."""

    def test_path_first_segment(self):
        config = LoaderConfig(paths={"templates": "../templates"})
        assert config.match_path("templates/a") == "../templates/a"

    def test_path_exact(self):
        config = LoaderConfig(paths={"jquery": "vendor/jquery.min.js"})
        assert config.match_path("jquery") == "vendor/jquery.min.js"

    def test_path_longest_prefix_wins(self):
        config = LoaderConfig(paths={"a": "x", "a/b": "y"})
        assert config.match_path("a/b/c") == "y/c"
        assert config.match_path("a/c") == "x/c"

    def test_path_requires_whole_segment(self):
        config = LoaderConfig(paths={"temp": "tmp"})
        assert config.match_path("templates/a") is None

    def test_no_paths(self):
        assert LoaderConfig().match_path("a") is None

    def test_star_map(self):
        config = LoaderConfig(map={"*": {"foobar": "b"}})
        assert config.match_map("foobar", "a") == "b"
        assert config.match_map("other", "a") is None

    def test_owner_map_before_star(self):
        config = LoaderConfig(map={"*": {"dep": "star"}, "some/module": {"dep": "owner"}})
        assert config.match_map("dep", "some/module") == "owner"
        assert config.match_map("dep", "some/module/child") == "owner"
        assert config.match_map("dep", "other") == "star"

    def test_owner_map_without_match_falls_back_to_star(self):
        config = LoaderConfig(map={"*": {"dep": "star"}, "mod": {"unrelated": "x"}})
        assert config.match_map("dep", "mod") == "star"

    def test_map_prefix_replacement(self):
        config = LoaderConfig(map={"*": {"inner/templates": "templates/inner"}})
        assert config.match_map("inner/templates/b", None) == "templates/inner/b"
