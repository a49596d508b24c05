"""General-purpose analysis for any project."""

from pathlib import Path
from typing import Union

from ..project import detect_project
from ..registry import DriverRegistry, default_registry
from ..walker import AnalysisResult, ProjectWalker
from .base import BaseAnalyzer


class ProjectAnalyzer(BaseAnalyzer):
    """Walks a project with every built-in driver except Laravel.

    Dot-prefixed names are skipped along with ``config.ignore_names``.
    """

    name = "project"
    description = "General analysis of PHP, JavaScript, TypeScript, Vue and JSON sources"

    def _create_registry(self) -> DriverRegistry:
        return default_registry()

    def _create_walker(self) -> ProjectWalker:
        return ProjectWalker(
            self.registry,
            ignore_names=self.config.ignore_names,
            skip_hidden=True,
            max_file_size=self.config.max_file_size_bytes,
            follow_symlinks=self.config.follow_symlinks,
        )

    def analyze(self, root: Union[str, Path]) -> AnalysisResult:
        root = self._validate_root(root)
        project = detect_project(root)
        return self._walk(root, project)
