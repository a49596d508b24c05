"""
Code Cortex - Driver-based static code metrics

Walks a project, dispatches every file to the most specific driver that
claims it and merges the per-file metric records into per-driver and
project-wide aggregates. A Laravel mode adds framework components,
security and performance findings and dead/duplicate code detection.
"""

__version__ = "0.1.0"

from .analyzers import LaravelAnalyzer, ProjectAnalyzer, create_analyzer
from .registry import DriverRegistry, default_registry, laravel_registry
from .walker import AnalysisResult, ProjectWalker, ScanStatistics

__all__ = [
    "ProjectAnalyzer",
    "LaravelAnalyzer",
    "create_analyzer",
    "DriverRegistry",
    "default_registry",
    "laravel_registry",
    "ProjectWalker",
    "AnalysisResult",
    "ScanStatistics",
]
