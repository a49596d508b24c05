"""Tests for walker.py - traversal, aggregation and failure isolation."""

import os
from pathlib import Path

import pytest

from code_cortex.drivers import Driver, DriverDescriptor, Layer
from code_cortex.exceptions import FileAccessError, InvalidPathError
from code_cortex.registry import DriverRegistry, default_registry
from code_cortex import walker as walker_module
from code_cortex.walker import ProjectWalker, ScanStatistics


def _walker(**kwargs) -> ProjectWalker:
    kwargs.setdefault("ignore_names", ["node_modules", "vendor", "public/build"])
    return ProjectWalker(default_registry(), **kwargs)


class TestScenarios:
    def test_php_and_blade(self, make_tree, php_class, blade_template):
        root = make_tree({"a.php": php_class, "b.blade.php": blade_template})
        result = _walker().walk(root)

        assert result.aggregate["classes"] == 1
        assert result.aggregate["methods"] == 1
        assert result.driver_metrics["Blade"]["bladeDirectives"] == 2
        assert result.driver_metrics["Blade"]["bladeEchos"] == 1
        assert result.driver_metrics["PHP"]["files"] == 1
        assert result.stats.analyzed_files == 2

    def test_error_isolation(self, make_tree, php_class):
        files = {f"src/f{i}.php": php_class for i in range(9)}
        files["broken.json"] = "{invalid"
        result = _walker().walk(make_tree(files))

        assert result.stats.total_files == 10
        assert result.stats.analyzed_files == 10
        assert result.stats.skipped_files == 0
        assert result.stats.parse_errors == 1
        assert result.aggregate["classes"] == 9
        assert result.aggregate["files"] == 9
        assert result.driver_metrics["PHP"]["methods"] == 9

    def test_broken_json_does_not_count_as_file(self, make_tree):
        root = make_tree({"good.json": {"a": 1}, "broken.json": "{invalid"})
        bucket = _walker().walk(root).driver_metrics["JSON"]
        assert bucket["files"] == 1
        assert bucket["parseError"] is True

    def test_package_json_with_yarn(self, make_tree):
        root = make_tree({"package.json": {"dependencies": {"react": "^18.0.0"}}, "yarn.lock": ""})
        result = _walker().walk(root)
        bucket = result.driver_metrics["package.json"]
        assert bucket["frameworks"]["react"] is True
        assert bucket["packageManager"] == "yarn"
        # yarn.lock is claimed by no driver
        assert result.stats.skipped_files == 1

    def test_non_string_manifest_name(self, make_tree):
        root = make_tree({"composer.json": {"name": "acme/shop"}, "package.json": {"name": 123}})
        result = _walker().walk(root)

        assert result.stats.analyzed_files == 2
        assert result.aggregate["projectName"] == "acme/shop"
        assert result.driver_metrics["package.json"]["projectName"] == "123"


class TestTraversal:
    def test_unclaimed_files_are_skipped(self, make_tree):
        root = make_tree({"README.md": "# hi", "a.js": "let x = 1;"})
        stats = _walker().walk(root).stats
        assert stats.total_files == 2
        assert stats.analyzed_files == 1
        assert stats.skipped_files == 1

    def test_ignored_names_and_paths(self, make_tree):
        root = make_tree(
            {
                "node_modules/lib/index.js": "x",
                "public/build/app.js": "x",
                "public/app.js": "x",
                "src/app.js": "x",
            }
        )
        result = _walker().walk(root)
        assert result.stats.total_files == 2
        assert result.driver_metrics["JavaScript"]["files"] == 2

    def test_hidden_entries(self, make_tree):
        root = make_tree({".hidden/a.js": "x", ".eslintrc.json": "{}", "a.js": "x"})
        assert _walker().walk(root).stats.total_files == 1
        assert _walker(skip_hidden=False).walk(root).stats.total_files == 3

    def test_directories_are_recorded(self, make_tree):
        root = make_tree({"a/b/c.js": "x"})
        directories = _walker().walk(root).stats.directories
        assert directories == {str(root.resolve()), str(root.resolve() / "a"), str(root.resolve() / "a" / "b")}

    def test_sorted_order_pins_first_wins_fields(self, make_tree):
        root = make_tree(
            {
                "b/package.json": {"name": "second"},
                "a/package.json": {"name": "first"},
            }
        )
        result = _walker().walk(root)
        assert result.aggregate["projectName"] == "first"

    def test_driver_buckets_start_from_initial_metrics(self, make_tree):
        result = _walker().walk(make_tree({"a.js": "let x = 1;"}))
        bucket = result.driver_metrics["JavaScript"]
        for key in ("files", "loc", "cloc", "ncloc", "lloc"):
            assert key in bucket
        assert list(result.driver_metrics) == ["JavaScript"]

    def test_oversized_files_are_skipped(self, make_tree):
        root = make_tree({"big.js": "x" * 100, "small.js": "x"})
        stats = _walker(max_file_size=10).walk(root).stats
        assert stats.analyzed_files == 1
        assert stats.skipped_files == 1

    def test_timing(self, make_tree):
        stats = _walker().walk(make_tree({"a.js": "x"})).stats
        assert stats.end_time >= stats.start_time
        assert stats.duration >= 0


class TestFailures:
    def test_missing_root(self, tmp_path):
        with pytest.raises(InvalidPathError):
            _walker().walk(tmp_path / "missing")

    def test_root_must_be_directory(self, make_tree):
        root = make_tree({"a.js": "x"})
        with pytest.raises(InvalidPathError, match="Invalid path"):
            _walker().walk(root / "a.js")

    def test_read_failure_is_skipped(self, make_tree, monkeypatch):
        root = make_tree({"bad.js": "x", "good.js": "x"})
        real_read = walker_module.read_source

        def flaky_read(path):
            if path.name == "bad.js":
                raise FileAccessError(path, "permission denied")
            return real_read(path)

        monkeypatch.setattr(walker_module, "read_source", flaky_read)
        stats = _walker().walk(root).stats
        assert stats.analyzed_files == 1
        assert stats.skipped_files == 1

    def test_parse_exception_is_skipped(self, make_tree):
        def explode(ctx):
            raise RuntimeError("boom")

        broken = Driver(
            DriverDescriptor("Broken", extensions=frozenset({".x"}), priority=1),
            layers=(Layer("broken", explode),),
        )
        registry = DriverRegistry([broken])
        registry.register(default_registry().get("JavaScript"))

        root = make_tree({"a.x": "data", "b.js": "x"})
        result = ProjectWalker(registry).walk(root)
        assert result.stats.skipped_files == 1
        assert result.stats.analyzed_files == 1
        assert "Broken" not in result.driver_metrics

    def test_unlistable_directory_is_skipped(self, make_tree, monkeypatch):
        root = make_tree({"locked/a.js": "x", "open/b.js": "x", "c.js": "x"})
        real_scandir = os.scandir

        def guarded_scandir(path):
            if Path(path).name == "locked":
                raise PermissionError(13, "Permission denied", str(path))
            return real_scandir(path)

        monkeypatch.setattr(walker_module.os, "scandir", guarded_scandir)
        stats = _walker().walk(root).stats
        assert stats.total_files == 2
        assert stats.analyzed_files == 2

    def test_symlink_cycle_terminates(self, make_tree):
        root = make_tree({"pkg/a.js": "let x = 1;"})
        try:
            (root / "alias").symlink_to(root / "pkg", target_is_directory=True)
            (root / "pkg" / "loop").symlink_to(root, target_is_directory=True)
        except OSError:
            pytest.skip("symlinks not supported")

        result = _walker(follow_symlinks=True).walk(root)
        assert result.stats.total_files == 1
        assert result.stats.analyzed_files == 1
        assert result.driver_metrics["JavaScript"]["files"] == 1

    def test_symlinks_are_not_followed_by_default(self, make_tree):
        root = make_tree({"pkg/a.js": "let x = 1;"})
        try:
            (root / "alias").symlink_to(root / "pkg", target_is_directory=True)
        except OSError:
            pytest.skip("symlinks not supported")

        assert _walker().walk(root).stats.total_files == 1


class TestScanStatistics:
    def test_to_dict(self):
        stats = ScanStatistics(directories={"a", "b"}, total_files=3, analyzed_files=2, skipped_files=1)
        data = stats.to_dict()
        assert data["directories"] == 2
        assert data["totalFiles"] == 3
        assert data["analyzedFiles"] == 2
        assert data["skippedFiles"] == 1
        assert data["parseErrors"] == 0
