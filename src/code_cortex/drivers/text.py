"""Line counting, comment stripping and complexity heuristics.

Every helper scans its whole input from the start; compiled patterns carry
no match state between calls.
"""

import re
from typing import Dict, Tuple

# Applied in order: line comments first for PHP, block comments first for JS.
PHP_COMMENTS: Tuple["re.Pattern[str]", ...] = (
    re.compile(r"//.*$|#.*$", re.MULTILINE),
    re.compile(r"/\*[\s\S]*?\*/"),
)
JS_COMMENTS: Tuple["re.Pattern[str]", ...] = (
    re.compile(r"/\*[\s\S]*?\*/"),
    re.compile(r"//.*$", re.MULTILINE),
)

LOGICAL_KEYWORDS = re.compile(r"\b(?:if|for|while|switch|function|class|return)\b")

DECISION_POINTS: Tuple["re.Pattern[str]", ...] = (
    re.compile(r"\bif\b"),
    re.compile(r"\bfor\b"),
    re.compile(r"\bwhile\b"),
    re.compile(r"\bcase\b"),
    re.compile(r"\bcatch\b"),
    re.compile(r"&&"),
    re.compile(r"\|\|"),
    re.compile(r"\?[^:]"),
)


def count(pattern: "re.Pattern[str]", text: str) -> int:
    """Number of non-overlapping matches of ``pattern`` in ``text``."""
    return sum(1 for _ in pattern.finditer(text))


def count_lines(content: str, clean: str) -> Dict[str, int]:
    """Physical, comment and code line counts.

    ``ncloc`` counts non-blank lines of ``clean`` (the comment-free text);
    every other physical line of ``content`` is a comment or blank line.
    """
    loc = len(content.split("\n"))
    ncloc = sum(1 for line in clean.split("\n") if line.strip())
    return {"loc": loc, "cloc": loc - ncloc, "ncloc": ncloc}


def count_logical_lines(clean: str) -> int:
    return clean.count(";") + clean.count("{") + count(LOGICAL_KEYWORDS, clean)


def calculate_complexity(clean: str) -> int:
    """Cyclomatic complexity estimate: 1 plus one per decision point."""
    return 1 + sum(count(p, clean) for p in DECISION_POINTS)
