"""Analysis modes"""

from .base import BaseAnalyzer
from .detect import ANALYZERS, create_analyzer, detect_analyzer_type
from .laravel import EnhancedMetrics, LaravelAnalyzer
from .project import ProjectAnalyzer

__all__ = [
    "BaseAnalyzer",
    "ProjectAnalyzer",
    "LaravelAnalyzer",
    "EnhancedMetrics",
    "ANALYZERS",
    "create_analyzer",
    "detect_analyzer_type",
]
