"""Base analyzer: one registry, one ignore policy, one walk."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from ..config import AnalysisConfig, default_config
from ..exceptions import InvalidPathError
from ..project import ProjectContext
from ..registry import DriverRegistry
from ..walker import AnalysisResult, ProjectWalker


class BaseAnalyzer(ABC):
    """Abstract base class for analysis modes"""

    name = "base"
    description = ""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or default_config
        self.registry = self._create_registry()

    @abstractmethod
    def _create_registry(self) -> DriverRegistry:
        """Drivers available in this mode"""
        pass

    @abstractmethod
    def _create_walker(self) -> ProjectWalker:
        """Walker configured with this mode's ignore policy"""
        pass

    @abstractmethod
    def analyze(self, root: Union[str, Path]) -> AnalysisResult:
        """Analyze the project rooted at ``root``"""
        pass

    @staticmethod
    def _validate_root(root: Union[str, Path]) -> Path:
        root = Path(root)
        if not root.exists():
            raise InvalidPathError(root, "path does not exist")
        if not root.is_dir():
            raise InvalidPathError(root, "not a directory")
        return root.resolve()

    def _walk(self, root: Path, project: Optional[ProjectContext]) -> AnalysisResult:
        return self._create_walker().walk(root, project)
