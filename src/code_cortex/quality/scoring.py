"""Project-level quality score and recommendations.

The score starts at 100 and loses points per finding:

    unused class        2
    unused method       1
    unused import       0.5
    duplicate pair      3
    security issue      10 / 5 / 2 for high / medium / low severity

It is clamped at 0 and rounded.
"""

from typing import Iterable, List, Mapping, Optional, Sequence

from .models import DeadCodeReport, DuplicatePair

SEVERITY_PENALTY = {"high": 10, "medium": 5, "low": 2}


def calculate_quality_score(
    dead_code: Optional[DeadCodeReport],
    duplicates: Optional[Sequence[DuplicatePair]],
    security_issues: Iterable[Mapping] = (),
) -> int:
    score = 100.0

    if dead_code:
        score -= len(dead_code.get("unusedClasses", [])) * 2
        score -= len(dead_code.get("unusedMethods", [])) * 1
        score -= len(dead_code.get("unusedImports", [])) * 0.5

    if duplicates:
        score -= len(duplicates) * 3

    for issue in security_issues:
        score -= SEVERITY_PENALTY.get(issue.get("severity", ""), 0)

    return max(0, round(score))


def build_recommendations(
    dead_code: Optional[DeadCodeReport],
    duplicates: Optional[Sequence[DuplicatePair]],
    score: int,
) -> List[str]:
    recommendations = []

    if dead_code:
        classes = len(dead_code.get("unusedClasses", []))
        methods = len(dead_code.get("unusedMethods", []))
        imports = len(dead_code.get("unusedImports", []))
        if classes:
            recommendations.append(f"Remove {classes} unused classes to reduce codebase size")
        if methods:
            recommendations.append(f"Remove {methods} unused methods to improve maintainability")
        if imports:
            recommendations.append(f"Clean up {imports} unused imports")

    if duplicates:
        recommendations.append(
            f"Refactor {len(duplicates)} duplicate code blocks into reusable functions"
        )

    if score < 80:
        recommendations.append(
            "Consider implementing automated code quality checks in your CI/CD pipeline"
        )

    return recommendations
