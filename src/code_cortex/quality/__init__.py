"""Dead-code and duplicate-code analysis."""

from .analyzer import SPECIAL_METHODS, CodeQualityAnalyzer
from .models import DEAD_CODE_KINDS, QualityReport, empty_dead_code
from .scoring import build_recommendations, calculate_quality_score
from .similarity import levenshtein_distance, similarity

__all__ = [
    "CodeQualityAnalyzer",
    "QualityReport",
    "DEAD_CODE_KINDS",
    "SPECIAL_METHODS",
    "empty_dead_code",
    "calculate_quality_score",
    "build_recommendations",
    "levenshtein_distance",
    "similarity",
]
