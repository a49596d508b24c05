"""Project-level facts detected once per analysis run.

Some drivers only apply to certain kinds of project (the Laravel driver
needs a ``composer.json`` requiring ``laravel/framework``). Detection runs
once before traversal and the resulting :class:`ProjectContext` is passed to
every ``can_handle``/``parse`` call, so every file in a run sees the same
answer.
"""

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .logging_config import get_logger
from .quality.models import QualityReport

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProjectContext:
    """Immutable facts about the project being analysed."""

    root: Path
    project_root: Optional[Path] = None
    is_laravel: bool = False
    laravel_version: Optional[str] = None
    frontend_stack: Tuple[str, ...] = ()
    quality: Optional[QualityReport] = None

    @property
    def project_type(self) -> Optional[str]:
        return "Laravel" if self.is_laravel else None

    def with_quality(self, report: QualityReport) -> "ProjectContext":
        return replace(self, quality=report)


def as_mapping(value: Any) -> Dict[str, Any]:
    """``value`` when it is a JSON object, else an empty dict."""
    return value if isinstance(value, dict) else {}


def read_json_file(path: Path) -> Optional[Any]:
    """Parse a JSON file, returning None when it is missing or invalid."""
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.debug(f"Ignoring unreadable JSON file {path}: {e}")
        return None


def find_project_root(start: Path) -> Optional[Path]:
    """Closest directory at or above ``start`` that holds a composer.json."""
    start = Path(start).resolve()
    directory = start if start.is_dir() else start.parent
    for candidate in (directory, *directory.parents):
        if (candidate / "composer.json").is_file():
            return candidate
    return None


def laravel_version(project_root: Optional[Path]) -> Optional[str]:
    """The ``laravel/framework`` constraint from composer.json, if any."""
    if project_root is None:
        return None
    composer = as_mapping(read_json_file(project_root / "composer.json"))
    version = as_mapping(composer.get("require")).get("laravel/framework")
    return str(version) if version else None


def detect_frontend_stack(root: Path) -> Tuple[str, ...]:
    """Frontend technologies declared in the root package.json, plus Blade views."""
    stack = []

    package = read_json_file(root / "package.json")
    if isinstance(package, dict):
        deps = {**as_mapping(package.get("dependencies")), **as_mapping(package.get("devDependencies"))}
        if deps.get("react"):
            stack.append(f"React {deps['react']}")
        if deps.get("vue"):
            stack.append(f"Vue {deps['vue']}")
        if deps.get("@inertiajs/inertia") or deps.get("@inertiajs/react") or deps.get("@inertiajs/vue3"):
            stack.append("Inertia.js")
        if deps.get("livewire"):
            stack.append("Livewire")
        if deps.get("tailwindcss"):
            stack.append("Tailwind CSS")
        if deps.get("bootstrap"):
            stack.append("Bootstrap")
        if deps.get("sass"):
            stack.append("Sass")
        if deps.get("typescript"):
            stack.append("TypeScript")

    views = root / "resources" / "views"
    if views.is_dir():
        blade_files = [p for p in views.rglob("*.blade.php") if p.is_file()]
        if blade_files:
            stack.append(f"Blade Templates ({len(blade_files)} files)")

    return tuple(stack)


def detect_project(root: Path) -> ProjectContext:
    """Inspect ``root`` once and describe the project it contains."""
    root = Path(root).resolve()
    project_root = find_project_root(root)
    version = laravel_version(project_root)

    if version:
        logger.info(f"Detected Laravel project: {version}")
    elif project_root is not None:
        logger.debug(f"composer.json found in {project_root} but no laravel/framework dependency")

    return ProjectContext(
        root=root,
        project_root=project_root,
        is_laravel=version is not None,
        laravel_version=version,
        frontend_stack=detect_frontend_stack(root),
    )
