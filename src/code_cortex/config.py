"""Configuration loading and management for Code Cortex.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.code-cortex.toml)
    3. Project config (./code-cortex.toml)
    4. Explicit config file
    5. Environment variables (CODE_CORTEX_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(verbose=True, analyzer="laravel")
    >>> config.verbosity
    'verbose'
    >>> config.analyzer
    'laravel'
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError

Verbosity = Literal["quiet", "normal", "verbose"]
AnalyzerKind = Literal["project", "laravel", "auto"]

ENV_PREFIX = "CODE_CORTEX_"

# Names skipped by the general project walker (dot-prefixed names are
# skipped as well in that mode).
DEFAULT_IGNORE_NAMES = [
    "node_modules",
    "vendor",
    ".git",
    ".svn",
    "dist",
    "build",
    "coverage",
    ".next",
    ".nuxt",
    "out",
    "public/build",
    "storage",
    "bootstrap/cache",
    ".idea",
    ".vscode",
]

# Laravel projects keep meaningful dot-directories and a storage/ tree.
LARAVEL_IGNORE_NAMES = [name for name in DEFAULT_IGNORE_NAMES if name != "storage"]

QUALITY_IGNORE_NAMES = ["vendor", "node_modules", ".git", "storage", "bootstrap/cache"]


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for one analysis run.

    Attributes:
        Traversal:
            ignore_names: Basenames or root-relative paths skipped by the walker
            laravel_ignore_names: Ignore set used by the Laravel analyzer
            max_file_size_mb: Files larger than this are skipped
            follow_symlinks: Follow symbolic links during traversal

        Code quality:
            quality_ignore_names: Names skipped when collecting PHP files
            duplicate_threshold: Minimum similarity for a duplicate block (0-1)
            duplicate_block_lines: Lines per compared block
            enable_duplicate_detection: Run the pairwise duplicate scan

        Execution:
            analyzer: Which analyzer to run (project, laravel or auto)
            verbosity: Logging verbosity level
    """

    ignore_names: list[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_NAMES))
    laravel_ignore_names: list[str] = field(default_factory=lambda: list(LARAVEL_IGNORE_NAMES))
    max_file_size_mb: float = 10.0
    follow_symlinks: bool = False

    quality_ignore_names: list[str] = field(default_factory=lambda: list(QUALITY_IGNORE_NAMES))
    duplicate_threshold: float = 0.8
    duplicate_block_lines: int = 5
    enable_duplicate_detection: bool = True

    analyzer: AnalyzerKind = "project"
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.max_file_size_mb <= 0:
            raise ValueError("max_file_size_mb must be positive")
        if not 0.0 <= self.duplicate_threshold <= 1.0:
            raise ValueError("duplicate_threshold must be between 0.0 and 1.0")
        if self.duplicate_block_lines < 1:
            raise ValueError("duplicate_block_lines must be at least 1")
        if self.analyzer not in ("project", "laravel", "auto"):
            raise ValueError(f"analyzer must be project, laravel or auto, got {self.analyzer!r}")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError(f"verbosity must be quiet, normal or verbose, got {self.verbosity!r}")

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)


default_config = AnalysisConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".code-cortex.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except Exception as e:
            raise ConfigurationError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "code-cortex.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise ConfigurationError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise ConfigurationError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    # Convert verbosity boolean flags to string
    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return AnalysisConfig(**merged)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from CODE_CORTEX_* environment variables.

    List fields are not read from the environment.

    Returns:
        Dict of field_name -> parsed_value for any CODE_CORTEX_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    if origin is list or type_hint is list:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore

    with open(path, "rb") as f:
        return tomllib.load(f)
