"""Dead-code and duplicate-code detection for PHP projects.

Both analyses are textual heuristics:

- An identifier is "unused" when it occurs at most once (its own
  declaration) in the analysed corpus. Classes and methods are counted
  across every PHP file of the corpus; imports and variables within the
  declaring file.
- Two blocks of ``block_lines`` consecutive lines are duplicates when their
  edit-distance similarity reaches ``duplicate_threshold``. Directories are
  compared file against file (O(n^2) in files and in lines); a single file
  is compared against itself with non-overlapping windows.
"""

import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

from ..config import QUALITY_IGNORE_NAMES
from ..exceptions import InvalidPathError
from ..logging_config import get_logger
from .models import DeadCodeReport, DuplicatePair, Finding, QualityReport, empty_dead_code
from .similarity import may_reach, similarity

logger = get_logger(__name__)

PathLike = Union[str, Path]

CLASS_PATTERN = re.compile(r"\bclass\s+(\w+)")
METHOD_PATTERN = re.compile(r"\b(?:public|private|protected)\s+(?:static\s+)?function\s+(\w+)")
IMPORT_PATTERN = re.compile(r"^use\s+([^;]+);", re.MULTILINE)
VARIABLE_PATTERN = re.compile(r"\$(\w+)\s*=(?![=>])")

# Magic methods and methods invoked by the framework rather than by name.
SPECIAL_METHODS = frozenset(
    {
        "__construct",
        "__destruct",
        "__call",
        "__callStatic",
        "__get",
        "__set",
        "__isset",
        "__unset",
        "__sleep",
        "__wakeup",
        "__toString",
        "__invoke",
        "__set_state",
        "__clone",
        "__debugInfo",
        "index",
        "create",
        "store",
        "show",
        "edit",
        "update",
        "destroy",
        "handle",
        "boot",
        "register",
        "up",
        "down",
        "run",
    }
)

SUPERGLOBALS = frozenset(
    {"this", "_GET", "_POST", "_REQUEST", "_SERVER", "_SESSION", "_COOKIE", "_FILES", "_ENV", "GLOBALS"}
)


def _line_of(content: str, offset: int) -> int:
    return content.count("\n", 0, offset) + 1


def _occurrences(name: str, text: str) -> int:
    return len(re.findall(rf"\b{re.escape(name)}\b", text))


class CodeQualityAnalyzer:
    """Finds unused declarations and near-duplicate code blocks."""

    def __init__(
        self,
        duplicate_threshold: float = 0.8,
        block_lines: int = 5,
        ignore_names: Optional[Sequence[str]] = None,
    ):
        self.duplicate_threshold = duplicate_threshold
        self.block_lines = block_lines
        self.ignore_names = frozenset(ignore_names if ignore_names is not None else QUALITY_IGNORE_NAMES)

    # ── File discovery ─────────────────────────────────────────

    def should_ignore(self, name: str, relative: str = "") -> bool:
        return name in self.ignore_names or relative in self.ignore_names or name.startswith(".")

    def find_php_files(self, target: PathLike) -> List[Path]:
        """All ``.php`` files under ``target`` in sorted traversal order."""
        target = Path(target)
        if not target.is_dir():
            return [target] if target.suffix == ".php" else []

        files: List[Path] = []
        self._collect(target, target, files, set())
        return files

    def _collect(
        self, root: Path, directory: Path, files: List[Path], visited: Set[Tuple[int, int]]
    ) -> None:
        # symlinked directories are followed; each real directory is listed once
        try:
            info = directory.stat()
            inode = (info.st_dev, info.st_ino)
            if inode in visited:
                return
            visited.add(inode)
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.warning(f"Cannot list {directory}: {e}")
            return

        for entry in entries:
            relative = entry.relative_to(root).as_posix()
            if self.should_ignore(entry.name, relative):
                continue
            try:
                if entry.is_dir():
                    self._collect(root, entry, files, visited)
                elif entry.name.endswith(".php"):
                    files.append(entry)
            except OSError as e:
                logger.warning(f"Cannot stat {entry}: {e}")

    def read_all(self, files: Iterable[Path]) -> Dict[str, str]:
        """Read files into a path -> content map, dropping unreadable ones."""
        corpus: Dict[str, str] = {}
        for path in files:
            try:
                corpus[str(path)] = path.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                logger.warning(f"Could not read file: {path} ({e})")
        return corpus

    # ── Dead code ──────────────────────────────────────────────

    def analyze_dead_code(self, target: PathLike) -> DeadCodeReport:
        """Report unused classes, methods, imports and variables.

        For a directory every PHP file is both reported on and part of the
        corpus. For a single file only that file is reported on, but the
        PHP files next to it still count as usages.
        """
        target = Path(target)
        if target.is_dir():
            reported = self.read_all(self.find_php_files(target))
            corpus = reported
        else:
            reported = self.read_all([target])
            corpus = dict(self.read_all(self.find_php_files(target.parent)))
            corpus.update(reported)

        if not reported:
            return empty_dead_code()

        all_content = "\n".join(corpus.values())
        return {
            "unusedClasses": self._unused_classes(reported, all_content),
            "unusedMethods": self._unused_methods(reported, all_content),
            "unusedImports": self._unused_imports(reported),
            "unusedVariables": self._unused_variables(reported),
        }

    @staticmethod
    def _unused_classes(files: Dict[str, str], all_content: str) -> List[Finding]:
        unused = []
        for filepath, content in files.items():
            for match in CLASS_PATTERN.finditer(content):
                name = match.group(1)
                if _occurrences(name, all_content) <= 1:
                    unused.append({"name": name, "file": filepath, "line": _line_of(content, match.start())})
        return unused

    @staticmethod
    def _unused_methods(files: Dict[str, str], all_content: str) -> List[Finding]:
        unused = []
        for filepath, content in files.items():
            for match in METHOD_PATTERN.finditer(content):
                name = match.group(1)
                if name in SPECIAL_METHODS:
                    continue
                calls = len(re.findall(rf"\b{re.escape(name)}\s*\(", all_content))
                if calls <= 1:
                    unused.append({"name": name, "file": filepath, "line": _line_of(content, match.start())})
        return unused

    @staticmethod
    def _unused_imports(files: Dict[str, str]) -> List[Finding]:
        unused = []
        for filepath, content in files.items():
            for match in IMPORT_PATTERN.finditer(content):
                import_path = match.group(1).strip()
                if "{" in import_path:
                    continue
                # use Foo\Bar as Baz; -> Baz
                alias = re.split(r"\s+as\s+", import_path, flags=re.IGNORECASE)
                name = alias[-1].strip() if len(alias) > 1 else import_path.split("\\")[-1]
                if _occurrences(name, content) <= 1:
                    unused.append({"name": import_path, "file": filepath, "line": _line_of(content, match.start())})
        return unused

    @staticmethod
    def _unused_variables(files: Dict[str, str]) -> List[Finding]:
        unused = []
        for filepath, content in files.items():
            seen = set()
            for match in VARIABLE_PATTERN.finditer(content):
                name = match.group(1)
                if name in seen or name in SUPERGLOBALS:
                    continue
                seen.add(name)
                if len(re.findall(rf"\${re.escape(name)}\b", content)) <= 1:
                    unused.append({"name": f"${name}", "file": filepath, "line": _line_of(content, match.start())})
        return unused

    # ── Duplicate code ─────────────────────────────────────────

    def analyze_duplicate_code(self, target: PathLike) -> List[DuplicatePair]:
        """Report similar blocks between every pair of PHP files.

        A single file is compared against itself instead; its entry is
        returned even when no similarities are found.
        """
        target = Path(target)
        if not target.is_dir():
            corpus = self.read_all([target])
            content = corpus.get(str(target))
            if content is None:
                return []
            return [
                {
                    "file1": str(target),
                    "file2": str(target),
                    "similarities": self.find_internal_duplicates(content),
                }
            ]

        corpus = self.read_all(self.find_php_files(target))
        paths = list(corpus)
        duplicates: List[DuplicatePair] = []
        for i, first in enumerate(paths):
            for second in paths[i + 1 :]:
                found = self.find_similar_blocks(corpus[first], corpus[second])
                if found:
                    duplicates.append({"file1": first, "file2": second, "similarities": found})
        return duplicates

    def _windows(self, content: str) -> List[str]:
        lines = content.split("\n")
        size = self.block_lines
        return ["\n".join(lines[i : i + size]) for i in range(len(lines) - size)]

    def _block(self, start: int, text: str) -> dict:
        return {"startLine": start + 1, "endLine": start + self.block_lines, "content": text}

    def _compare(self, block1: str, block2: str) -> Optional[float]:
        if not block1.strip() or not block2.strip():
            return None
        if not may_reach(len(block1), len(block2), self.duplicate_threshold):
            return None
        score = similarity(block1, block2)
        return score if score >= self.duplicate_threshold else None

    def find_similar_blocks(self, content1: str, content2: str) -> List[dict]:
        windows1 = self._windows(content1)
        windows2 = self._windows(content2)
        found = []
        for i, block1 in enumerate(windows1):
            for j, block2 in enumerate(windows2):
                score = self._compare(block1, block2)
                if score is not None:
                    found.append(
                        {
                            "similarity": score,
                            "block1": self._block(i, block1),
                            "block2": self._block(j, block2),
                        }
                    )
        return found

    def find_internal_duplicates(self, content: str) -> List[dict]:
        windows = self._windows(content)
        found = []
        for i, block1 in enumerate(windows):
            for j in range(i + self.block_lines, len(windows)):
                score = self._compare(block1, windows[j])
                if score is not None:
                    found.append(
                        {
                            "similarity": score,
                            "block1": self._block(i, block1),
                            "block2": self._block(j, windows[j]),
                        }
                    )
        return found

    # ── Entry points ───────────────────────────────────────────

    def analyze(self, target: PathLike, duplicates: bool = True) -> QualityReport:
        """Run both analyses over ``target`` and bundle the results."""
        return QualityReport(
            dead_code=self.analyze_dead_code(target),
            duplicates=self.analyze_duplicate_code(target) if duplicates else [],
        )

    def analyze_file(self, filepath: PathLike) -> dict:
        filepath = Path(filepath)
        if not filepath.is_file():
            raise InvalidPathError(filepath, "file not found")
        if filepath.suffix != ".php":
            raise InvalidPathError(filepath, "not a PHP file")

        return {
            "file": str(filepath),
            "deadCode": self.analyze_dead_code(filepath),
            "duplicates": self.analyze_duplicate_code(filepath),
        }

    def analyze_directory(self, directory: PathLike) -> dict:
        directory = Path(directory)
        if not directory.is_dir():
            raise InvalidPathError(directory, "not a directory")

        return {
            "directory": str(directory),
            "deadCode": self.analyze_dead_code(directory),
            "duplicates": self.analyze_duplicate_code(directory),
        }
