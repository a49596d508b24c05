"""JSON formatter for Code Cortex."""

import json
from typing import Any, Dict

from ..metrics import to_serializable
from ..walker import AnalysisResult
from .base import BaseFormatter


def result_to_dict(result: AnalysisResult) -> Dict[str, Any]:
    """Statistics, per-driver aggregates and the global aggregate as plain data."""
    data: Dict[str, Any] = {
        "root": str(result.root),
        "stats": result.stats.to_dict(),
        "drivers": to_serializable(result.driver_metrics),
        "aggregate": to_serializable(result.aggregate),
    }
    if result.project is not None:
        data["project"] = {
            "type": result.project.project_type,
            "laravelVersion": result.project.laravel_version,
            "frontendStack": list(result.project.frontend_stack),
        }
    if result.enhanced is not None:
        data["laravel"] = to_serializable(result.enhanced.to_dict())
    return data


class JsonFormatter(BaseFormatter):
    """Render the analysis result as JSON."""

    def render(self, result: AnalysisResult) -> None:
        print(self.format(result))

    def format(self, result: AnalysisResult) -> str:
        return json.dumps(result_to_dict(result), indent=2)
