"""JSON drivers: generic JSON plus package.json and composer.json manifests."""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from ..metrics.record import MetricRecord, error_record
from ..project import as_mapping, read_json_file
from .base import Driver, DriverDescriptor, ExtractionContext, Layer, Sections, detected
from .text import count_lines


PACKAGE_FRAMEWORKS = {
    "react": "react",
    "vue": "vue",
    "angular": "@angular/core",
    "svelte": "svelte",
    "nextjs": "next",
    "nuxt": "nuxt",
    "express": "express",
    "nestjs": "@nestjs/core",
    "gatsby": "gatsby",
}
BUILD_TOOLS = {
    "webpack": "webpack",
    "vite": "vite",
    "rollup": "rollup",
    "parcel": "parcel",
    "esbuild": "esbuild",
    "turbopack": "turbopack",
}
TESTING_FRAMEWORKS = {
    "jest": "jest",
    "vitest": "vitest",
    "mocha": "mocha",
    "jasmine": "jasmine",
    "cypress": "cypress",
    "playwright": "playwright",
}
UI_LIBRARIES = {
    "tailwind": "tailwindcss",
    "bootstrap": "bootstrap",
    "materialui": "@mui/material",
    "antd": "antd",
    "chakra": "@chakra-ui/react",
}

# Checked in order; the first lockfile found next to package.json wins.
LOCKFILES = (
    ("yarn.lock", "yarn"),
    ("pnpm-lock.yaml", "pnpm"),
    ("package-lock.json", "npm"),
)

PHP_FRAMEWORKS = {
    "laravel": "laravel/framework",
    "symfony": "symfony/symfony",
    "lumen": "laravel/lumen-framework",
    "cakephp": "cakephp/cakephp",
    "codeigniter": "codeigniter4/framework",
}
LARAVEL_PACKAGES = {
    "sanctum": "laravel/sanctum",
    "passport": "laravel/passport",
    "horizon": "laravel/horizon",
    "telescope": "laravel/telescope",
    "breeze": "laravel/breeze",
    "jetstream": "laravel/jetstream",
    "livewire": "livewire/livewire",
    "inertia": "inertiajs/inertia-laravel",
}
FRONTEND_INTEGRATION = {
    "inertia": "inertiajs/inertia-laravel",
    "livewire": "livewire/livewire",
}


def _text(value: Any, default: Optional[str]) -> Optional[str]:
    """Manifest values are arbitrary JSON; string fields must stay strings."""
    return str(value) if value else default


def _flags(table: Mapping[str, str], deps: Mapping[str, Any]) -> Dict[str, bool]:
    return {name: bool(deps.get(package)) for name, package in table.items()}


def _manifest(ctx: ExtractionContext) -> Dict[str, Any]:
    """Decoded top-level object; raises ValueError for invalid JSON."""
    return as_mapping(ctx.decode_json())


# ── JSON ───────────────────────────────────────────────────────


def extract_json(ctx: ExtractionContext) -> MetricRecord:
    try:
        data = ctx.decode_json()
    except ValueError:
        return error_record()

    keys = len(data) if isinstance(data, (dict, list)) else 0
    return {
        **count_lines(ctx.content, ctx.content),
        "lloc": keys,
        "jsonObjects": 1,
        "topLevelKeys": keys,
        "files": 1,
    }


def json_sections(metrics: MetricRecord) -> Sections:
    if not metrics.get("jsonObjects"):
        return {}
    return {
        "JSON Files": {
            "Valid Files": metrics.get("jsonObjects", 0),
            "Top Level Keys": metrics.get("topLevelKeys", 0),
        }
    }


# ── package.json ───────────────────────────────────────────────


def detect_package_manager(path: Path) -> str:
    directory = Path(path).parent
    for lockfile, manager in LOCKFILES:
        if (directory / lockfile).exists():
            return manager
    return "unknown"


def extract_package_json(ctx: ExtractionContext) -> MetricRecord:
    try:
        pkg = _manifest(ctx)
    except ValueError:
        return {}

    dependencies = as_mapping(pkg.get("dependencies"))
    dev_dependencies = as_mapping(pkg.get("devDependencies"))
    peer_dependencies = as_mapping(pkg.get("peerDependencies"))
    all_deps = {**dependencies, **dev_dependencies, **peer_dependencies}

    return {
        "projectName": _text(pkg.get("name"), "unknown"),
        "projectVersion": _text(pkg.get("version"), "unknown"),
        "packageManager": detect_package_manager(ctx.path),
        "totalDependencies": len(dependencies),
        "totalDevDependencies": len(dev_dependencies),
        "totalPeerDependencies": len(peer_dependencies),
        "frameworks": _flags(PACKAGE_FRAMEWORKS, all_deps),
        "buildTools": _flags(BUILD_TOOLS, all_deps),
        "testingFrameworks": _flags(TESTING_FRAMEWORKS, all_deps),
        "hasTypeScript": bool(all_deps.get("typescript")),
        "uiLibraries": _flags(UI_LIBRARIES, all_deps),
        "scripts": len(as_mapping(pkg.get("scripts"))),
    }


def package_json_sections(metrics: MetricRecord) -> Sections:
    if not metrics.get("jsonObjects"):
        return {}

    dependencies = metrics.get("totalDependencies", 0)
    dev_dependencies = metrics.get("totalDevDependencies", 0)
    peer_dependencies = metrics.get("totalPeerDependencies", 0)
    sections: Sections = {
        "Project Info": {
            "Name": metrics.get("projectName", "unknown"),
            "Version": metrics.get("projectVersion", "unknown"),
            "Package Manager": metrics.get("packageManager", "unknown"),
            "Scripts": metrics.get("scripts", 0),
        },
        "Dependencies": {
            "Production Dependencies": dependencies,
            "Dev Dependencies": dev_dependencies,
            "Peer Dependencies": peer_dependencies,
            "Total": dependencies + dev_dependencies + peer_dependencies,
        },
    }

    frameworks = detected(metrics.get("frameworks"))
    if frameworks:
        sections["Detected Frameworks"] = {
            "Frameworks": ", ".join(frameworks),
            "TypeScript": "Yes" if metrics.get("hasTypeScript") else "No",
        }

    for title, key, label in (
        ("Build Tools", "buildTools", "Tools"),
        ("Testing", "testingFrameworks", "Frameworks"),
        ("UI Libraries", "uiLibraries", "Libraries"),
    ):
        names = detected(metrics.get(key))
        if names:
            sections[title] = {label: ", ".join(names)}

    return sections


# ── composer.json ──────────────────────────────────────────────


def vite_setup(path: Path) -> Tuple[bool, Optional[str]]:
    """``(has_vite, framework)`` read from the package.json next to ``path``."""
    package = read_json_file(Path(path).parent / "package.json")
    if not isinstance(package, dict):
        return False, None

    deps = {**as_mapping(package.get("dependencies")), **as_mapping(package.get("devDependencies"))}
    if not deps.get("vite"):
        return False, None
    if deps.get("react"):
        return True, "React"
    if deps.get("vue"):
        return True, "Vue"
    return True, None


def extract_composer_json(ctx: ExtractionContext) -> MetricRecord:
    try:
        composer = _manifest(ctx)
    except ValueError:
        return {}

    require = as_mapping(composer.get("require"))
    require_dev = as_mapping(composer.get("require-dev"))
    all_deps = {**require, **require_dev}
    autoload = as_mapping(composer.get("autoload"))
    autoload_files = autoload.get("files")
    has_vite, vite_framework = vite_setup(ctx.path)

    return {
        "projectName": _text(composer.get("name"), "unknown"),
        "projectDescription": _text(composer.get("description"), ""),
        "phpVersion": _text(require.get("php"), "unknown"),
        "totalDependencies": len(require),
        "totalDevDependencies": len(require_dev),
        "frameworks": _flags(PHP_FRAMEWORKS, all_deps),
        "hasLaravel": bool(all_deps.get("laravel/framework")),
        "laravelVersion": _text(all_deps.get("laravel/framework"), None),
        "laravelPackages": _flags(LARAVEL_PACKAGES, all_deps),
        "frontendIntegration": _flags(FRONTEND_INTEGRATION, all_deps),
        "hasViteSetup": has_vite,
        "viteWithFramework": vite_framework,
        "autoloadPsr4": len(as_mapping(autoload.get("psr-4"))),
        "autoloadFiles": len(autoload_files) if isinstance(autoload_files, list) else 0,
    }


def composer_json_sections(metrics: MetricRecord) -> Sections:
    if not metrics.get("jsonObjects"):
        return {}

    dependencies = metrics.get("totalDependencies", 0)
    dev_dependencies = metrics.get("totalDevDependencies", 0)
    sections: Sections = {
        "Project Info": {
            "Name": metrics.get("projectName", "unknown"),
            "Description": metrics.get("projectDescription") or "N/A",
            "PHP Version": metrics.get("phpVersion", "unknown"),
        },
        "Dependencies": {
            "Production Dependencies": dependencies,
            "Dev Dependencies": dev_dependencies,
            "Total": dependencies + dev_dependencies,
        },
    }

    frameworks = detected(metrics.get("frameworks"))
    if frameworks:
        sections["PHP Frameworks"] = {"Frameworks": ", ".join(frameworks)}
        if metrics.get("hasLaravel"):
            sections["Laravel Info"] = {"Version": metrics.get("laravelVersion") or "unknown"}

    packages = detected(metrics.get("laravelPackages"))
    if packages:
        sections["Laravel Packages"] = {"Packages": ", ".join(packages)}

    if metrics.get("hasViteSetup"):
        sections["Frontend Setup"] = {
            "Build Tool": "Vite",
            "Framework": metrics.get("viteWithFramework") or "None",
        }

    integration = as_mapping(metrics.get("frontendIntegration"))
    stacks = [
        label
        for key, label in (("inertia", "Inertia.js"), ("livewire", "Livewire"))
        if integration.get(key)
    ]
    if stacks:
        sections.setdefault("Frontend Setup", {})["Stack"] = ", ".join(stacks)

    if metrics.get("autoloadPsr4", 0) > 0 or metrics.get("autoloadFiles", 0) > 0:
        sections["Autoloading"] = {
            "PSR-4 Namespaces": metrics.get("autoloadPsr4", 0),
            "Autoload Files": metrics.get("autoloadFiles", 0),
        }

    return sections


JSON_LAYER = Layer("JSON", extract_json, json_sections)
PACKAGE_JSON_LAYER = Layer("package.json", extract_package_json, package_json_sections)
COMPOSER_JSON_LAYER = Layer("composer.json", extract_composer_json, composer_json_sections)

JSON = Driver(
    DriverDescriptor(
        name="JSON",
        extensions=frozenset({".json"}),
        exclude_patterns=(
            r"package-lock\.json$",
            r"composer\.lock$",
            r"yarn\.lock$",
            r"tsconfig\.json$",
        ),
        priority=5,
    ),
    layers=(JSON_LAYER,),
)

PACKAGE_JSON = JSON.specialize(
    "package.json",
    PACKAGE_JSON_LAYER,
    extensions=frozenset(),
    include_patterns=(r"package\.json$",),
    exclude_patterns=(),
    priority=25,
)

COMPOSER_JSON = JSON.specialize(
    "composer.json",
    COMPOSER_JSON_LAYER,
    extensions=frozenset(),
    include_patterns=(r"composer\.json$",),
    exclude_patterns=(),
    priority=25,
)
