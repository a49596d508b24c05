"""Result containers for dead-code and duplicate-code analysis."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

DEAD_CODE_KINDS = ("unusedClasses", "unusedMethods", "unusedImports", "unusedVariables")

Finding = Dict[str, Any]
DeadCodeReport = Dict[str, List[Finding]]
DuplicatePair = Dict[str, Any]


def empty_dead_code() -> DeadCodeReport:
    return {kind: [] for kind in DEAD_CODE_KINDS}


@dataclass(frozen=True)
class QualityReport:
    """Project-wide dead-code and duplicate-code findings.

    Computed once per run; drivers filter it per file.
    """

    dead_code: DeadCodeReport = field(default_factory=empty_dead_code)
    duplicates: List[DuplicatePair] = field(default_factory=list)

    def dead_code_for(self, filepath: str) -> DeadCodeReport:
        return {
            kind: [item for item in self.dead_code.get(kind, []) if item["file"] == filepath]
            for kind in DEAD_CODE_KINDS
        }

    def duplicates_for(self, filepath: str) -> List[DuplicatePair]:
        return [d for d in self.duplicates if filepath in (d["file1"], d["file2"])]
