"""Tests for project.py - one-time project detection."""

from code_cortex.project import (
    ProjectContext,
    detect_frontend_stack,
    detect_project,
    find_project_root,
    laravel_version,
    read_json_file,
)
from code_cortex.quality import QualityReport


class TestProjectRoot:
    def test_finds_composer_json_upwards(self, make_tree, laravel_composer):
        root = make_tree({"composer.json": laravel_composer, "app/Http/x.php": "<?php"})
        assert find_project_root(root / "app" / "Http") == root.resolve()
        assert find_project_root(root / "app" / "Http" / "x.php") == root.resolve()

    def test_laravel_version(self, make_tree, laravel_composer):
        root = make_tree({"composer.json": laravel_composer})
        assert laravel_version(root) == "^10.0"
        assert laravel_version(None) is None

    def test_non_laravel_composer(self, make_tree):
        root = make_tree({"composer.json": {"require": {"symfony/symfony": "^6.0"}}})
        assert laravel_version(root) is None

    def test_malformed_composer_json(self, make_tree):
        root = make_tree({"composer.json": {"require": ["laravel/framework"]}})
        assert laravel_version(root) is None
        make_tree({"composer.json": "[1, 2]"})
        assert laravel_version(root) is None

    def test_read_json_file_tolerates_bad_input(self, make_tree):
        root = make_tree({"bad.json": "{nope"})
        assert read_json_file(root / "bad.json") is None
        assert read_json_file(root / "missing.json") is None


class TestDetectProject:
    def test_laravel_project(self, laravel_project):
        project = detect_project(laravel_project)
        assert project.is_laravel
        assert project.laravel_version == "^10.0"
        assert project.project_type == "Laravel"
        assert project.project_root == laravel_project.resolve()

    def test_subdirectory_of_laravel_project(self, laravel_project):
        project = detect_project(laravel_project / "app")
        assert project.is_laravel
        assert project.root == (laravel_project / "app").resolve()

    def test_plain_project(self, make_tree):
        project = detect_project(make_tree({"a.js": "x"}, subdir="plain"))
        assert not project.is_laravel
        assert project.project_type is None

    def test_with_quality_returns_new_context(self, tmp_path):
        project = ProjectContext(root=tmp_path, is_laravel=True)
        report = QualityReport()
        updated = project.with_quality(report)
        assert updated.quality is report
        assert project.quality is None


class TestFrontendStack:
    def test_stack_from_package_json_and_views(self, make_tree):
        root = make_tree(
            {
                "package.json": {
                    "dependencies": {"vue": "^3.4.0", "@inertiajs/vue3": "^1.0"},
                    "devDependencies": {"tailwindcss": "^3.0", "typescript": "^5.0"},
                },
                "resources/views/home.blade.php": "",
                "resources/views/layouts/app.blade.php": "",
            }
        )
        assert detect_frontend_stack(root) == (
            "Vue ^3.4.0",
            "Inertia.js",
            "Tailwind CSS",
            "TypeScript",
            "Blade Templates (2 files)",
        )

    def test_empty_project(self, tmp_path):
        assert detect_frontend_stack(tmp_path) == ()

    def test_malformed_dependency_sections(self, make_tree):
        root = make_tree({"package.json": {"dependencies": ["react"], "devDependencies": "tailwindcss"}})
        assert detect_frontend_stack(root) == ()
        assert detect_project(root).frontend_stack == ()

    def test_non_object_package_json(self, make_tree):
        root = make_tree({"package.json": '["react"]'})
        assert detect_frontend_stack(root) == ()
