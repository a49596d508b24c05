"""Shared test fixtures for Code Cortex tests."""

import json
from pathlib import Path

import pytest


def write_tree(root: Path, files: dict) -> Path:
    """Create ``files`` (relative path -> text content, or dict for JSON) under ``root``."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, dict):
            content = json.dumps(content)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def make_tree(tmp_path):
    """Factory fixture building a file tree under tmp_path."""

    def _make(files: dict, subdir: str = "") -> Path:
        root = tmp_path / subdir if subdir else tmp_path
        root.mkdir(parents=True, exist_ok=True)
        return write_tree(root, files)

    return _make


@pytest.fixture
def php_class():
    """A minimal PHP class with one public method."""
    return "<?php class Foo { public function bar() {} }"


@pytest.fixture
def blade_template():
    """A Blade template with two directives and one echo."""
    return "@if(true) {{ $x }} @endif"


@pytest.fixture
def laravel_composer():
    """composer.json of a Laravel 10 application."""
    return {
        "name": "acme/shop",
        "description": "Shop",
        "require": {"php": "^8.1", "laravel/framework": "^10.0"},
        "require-dev": {"phpunit/phpunit": "^10.0"},
        "autoload": {"psr-4": {"App\\": "app/"}},
    }


@pytest.fixture
def laravel_project(make_tree, laravel_composer):
    """A small Laravel project with a model, a controller and a migration."""
    return make_tree(
        {
            "composer.json": laravel_composer,
            "app/Models/User.php": (
                "<?php\n"
                "namespace App\\Models;\n"
                "use Illuminate\\Database\\Eloquent\\Model;\n"
                "class User extends Model\n"
                "{\n"
                "    protected $fillable = ['name'];\n"
                "    public function posts() { return $this->hasMany(Post::class); }\n"
                "}\n"
            ),
            "app/Http/Controllers/UserController.php": (
                "<?php\n"
                "namespace App\\Http\\Controllers;\n"
                "use App\\Models\\User;\n"
                "class UserController extends Controller\n"
                "{\n"
                "    public function index()\n"
                "    {\n"
                "        $users = User::all();\n"
                "        return DB::raw('select 1');\n"
                "    }\n"
                "}\n"
            ),
            "database/migrations/2024_01_01_create_users.php": (
                "<?php\n"
                "class CreateUsers extends Migration\n"
                "{\n"
                "    public function up() {}\n"
                "}\n"
            ),
            "resources/views/welcome.blade.php": "@if($user) {{ $user->name }} @endif\n",
        },
        subdir="shop",
    )
