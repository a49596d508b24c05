"""Laravel-aware analysis with a project-wide code quality report."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..logging_config import get_logger
from ..project import ProjectContext, detect_project
from ..quality import CodeQualityAnalyzer, QualityReport, build_recommendations, calculate_quality_score
from ..quality.models import DeadCodeReport, DuplicatePair
from ..registry import DriverRegistry, laravel_registry
from ..walker import AnalysisResult, ProjectWalker
from .base import BaseAnalyzer

logger = get_logger(__name__)


@dataclass
class EnhancedMetrics:
    """Project-level Laravel report assembled after traversal."""

    project_type: Optional[str] = None
    laravel_version: Optional[str] = None
    frontend_stack: Tuple[str, ...] = ()
    dead_code: Optional[DeadCodeReport] = None
    duplicate_code: Optional[List[DuplicatePair]] = None
    security_issues: List[Dict[str, Any]] = field(default_factory=list)
    performance_issues: List[Dict[str, Any]] = field(default_factory=list)
    code_quality_score: int = 0
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectType": self.project_type,
            "laravelVersion": self.laravel_version,
            "frontendStack": list(self.frontend_stack),
            "deadCode": self.dead_code,
            "duplicateCode": self.duplicate_code,
            "securityIssues": self.security_issues,
            "performanceIssues": self.performance_issues,
            "codeQualityScore": self.code_quality_score,
            "recommendations": self.recommendations,
        }


class LaravelAnalyzer(BaseAnalyzer):
    """Analysis for Laravel projects.

    Project detection and the dead/duplicate code pass run once, before
    traversal, and are handed to the Laravel driver through the
    :class:`ProjectContext`. Dot-prefixed names are not skipped and
    ``storage/`` is walked. Projects that do not require
    ``laravel/framework`` get the general analysis with a warning.
    """

    name = "laravel"
    description = "Laravel components, security and performance checks, dead and duplicate code"

    def __init__(self, config=None):
        super().__init__(config)
        self.quality_analyzer = CodeQualityAnalyzer(
            duplicate_threshold=self.config.duplicate_threshold,
            block_lines=self.config.duplicate_block_lines,
            ignore_names=self.config.quality_ignore_names,
        )

    def _create_registry(self) -> DriverRegistry:
        return laravel_registry()

    def _create_walker(self) -> ProjectWalker:
        return ProjectWalker(
            self.registry,
            ignore_names=self.config.laravel_ignore_names,
            skip_hidden=False,
            max_file_size=self.config.max_file_size_bytes,
            follow_symlinks=self.config.follow_symlinks,
        )

    def analyze(self, root: Union[str, Path]) -> AnalysisResult:
        root = self._validate_root(root)
        project = detect_project(root)

        if not project.is_laravel:
            logger.warning(
                "This does not appear to be a Laravel project "
                "(no composer.json requiring laravel/framework); running general analysis"
            )
            return self._walk(root, project)

        project = project.with_quality(self._quality_report(project))
        result = self._walk(root, project)
        result.enhanced = self._enhanced_metrics(project, result)
        return result

    def _quality_report(self, project: ProjectContext) -> QualityReport:
        target = project.project_root or project.root
        logger.info(f"Analyzing dead code in {target}")
        if self.config.enable_duplicate_detection:
            logger.info("Analyzing duplicate code")
        return self.quality_analyzer.analyze(target, duplicates=self.config.enable_duplicate_detection)

    def _enhanced_metrics(self, project: ProjectContext, result: AnalysisResult) -> EnhancedMetrics:
        laravel = result.driver_metrics.get("Laravel", {})
        security = list(laravel.get("securityIssues", []))
        performance = list(laravel.get("performanceIssues", []))

        quality = project.quality or QualityReport()
        duplicates = quality.duplicates if self.config.enable_duplicate_detection else None
        score = calculate_quality_score(quality.dead_code, duplicates, security)

        return EnhancedMetrics(
            project_type=project.project_type,
            laravel_version=project.laravel_version,
            frontend_stack=project.frontend_stack,
            dead_code=quality.dead_code,
            duplicate_code=duplicates,
            security_issues=security,
            performance_issues=performance,
            code_quality_score=score,
            recommendations=build_recommendations(quality.dead_code, duplicates, score),
        )
