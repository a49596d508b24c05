"""Choosing an analyzer for a project."""

from pathlib import Path
from typing import Dict, Optional, Type, Union

from ..config import AnalysisConfig
from ..exceptions import InvalidConfigError
from ..logging_config import get_logger
from ..project import laravel_version
from .base import BaseAnalyzer
from .laravel import LaravelAnalyzer
from .project import ProjectAnalyzer

logger = get_logger(__name__)

ANALYZERS: Dict[str, Type[BaseAnalyzer]] = {
    "project": ProjectAnalyzer,
    "laravel": LaravelAnalyzer,
}

LARAVEL_DIRECTORIES = ("app", "resources", "database")
SCAN_SKIP = frozenset({"node_modules", "vendor"})


def has_php_files(directory: Path, max_depth: int = 3) -> bool:
    """Whether a ``.php`` file exists within ``max_depth`` levels of ``directory``."""

    def scan(current: Path, depth: int) -> bool:
        if depth > max_depth:
            return False
        try:
            entries = sorted(current.iterdir(), key=lambda p: p.name)
        except OSError:
            return False
        for entry in entries:
            if entry.name in SCAN_SKIP or entry.name.startswith("."):
                continue
            try:
                if entry.is_dir():
                    if scan(entry, depth + 1):
                        return True
                elif entry.name.endswith(".php"):
                    return True
            except OSError:
                continue
        return False

    return scan(directory, 0)


def detect_analyzer_type(root: Union[str, Path]) -> str:
    """``laravel`` or ``project``.

    A root composer.json requiring laravel/framework selects Laravel. A root
    package.json selects the general analyzer. Otherwise PHP sources next to
    ``app/``, ``resources/`` and ``database/`` directories select Laravel.
    """
    root = Path(root)

    if (root / "composer.json").is_file() and laravel_version(root):
        return "laravel"
    if (root / "package.json").is_file():
        return "project"
    if has_php_files(root) and all((root / d).exists() for d in LARAVEL_DIRECTORIES):
        return "laravel"
    return "project"


def create_analyzer(kind: str = "project", config: Optional[AnalysisConfig] = None, root=None) -> BaseAnalyzer:
    """Instantiate the analyzer named ``kind``.

    ``auto`` detects the kind from ``root`` (the current directory when
    omitted).

    Raises:
        InvalidConfigError: If ``kind`` names no analyzer
    """
    if kind == "auto":
        kind = detect_analyzer_type(root if root is not None else Path.cwd())
        logger.info(f"Auto-detected: {kind} project")

    try:
        analyzer_class = ANALYZERS[kind]
    except KeyError:
        raise InvalidConfigError("analyzer", kind, f"expected one of: auto, {', '.join(ANALYZERS)}")

    return analyzer_class(config)
