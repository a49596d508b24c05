"""Project traversal: resolve each file to a driver and aggregate its record."""

import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from .exceptions import FileAccessError, InvalidPathError, ParsingError
from .logging_config import get_logger
from .metrics import MetricRecord, base_metrics, is_error_record, merge_metrics
from .project import ProjectContext
from .registry import DriverRegistry

logger = get_logger(__name__)


@dataclass
class ScanStatistics:
    """Counters for one traversal."""

    directories: Set[str] = field(default_factory=set)
    total_files: int = 0
    analyzed_files: int = 0
    skipped_files: int = 0
    parse_errors: int = 0
    start_time: float = 0.0
    end_time: float = 0.0

    @property
    def duration(self) -> float:
        """Elapsed seconds between start and end of the walk."""
        return max(0.0, self.end_time - self.start_time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "directories": len(self.directories),
            "totalFiles": self.total_files,
            "analyzedFiles": self.analyzed_files,
            "skippedFiles": self.skipped_files,
            "parseErrors": self.parse_errors,
            "duration": round(self.duration, 3),
        }


@dataclass
class AnalysisResult:
    """Everything a run produced.

    ``driver_metrics`` maps driver name to its aggregate, in the order the
    drivers were first used. ``enhanced`` holds the Laravel report when the
    Laravel analyzer ran on a Laravel project.
    """

    root: Path
    stats: ScanStatistics
    driver_metrics: Dict[str, MetricRecord]
    aggregate: MetricRecord
    drivers: DriverRegistry
    project: Optional[ProjectContext] = None
    enhanced: Optional[Any] = None


def read_source(filepath: Path) -> str:
    """Read a file as UTF-8, replacing undecodable bytes.

    Raises:
        FileAccessError: If the file cannot be read
    """
    try:
        with open(filepath, encoding="utf-8", errors="replace") as f:
            return f.read()
    except OSError as e:
        raise FileAccessError(filepath, f"Cannot read file: {e}")


class ProjectWalker:
    """Depth-first traversal over a project tree.

    Entries are visited in sorted name order. An entry is skipped when its
    basename or its path relative to the root is in ``ignore_names``; with
    ``skip_hidden`` dot-prefixed names are skipped too.
    """

    def __init__(
        self,
        registry: DriverRegistry,
        ignore_names: Sequence[str] = (),
        skip_hidden: bool = True,
        max_file_size: Optional[int] = None,
        follow_symlinks: bool = False,
    ):
        self.registry = registry
        self.ignore_names = frozenset(ignore_names)
        self.skip_hidden = skip_hidden
        self.max_file_size = max_file_size
        self.follow_symlinks = follow_symlinks

    def should_ignore(self, name: str, relative: str) -> bool:
        if name in self.ignore_names or relative in self.ignore_names:
            return True
        return self.skip_hidden and name.startswith(".")

    def walk(self, root: Path, project: Optional[ProjectContext] = None) -> AnalysisResult:
        """Analyse every file under ``root``.

        Raises:
            InvalidPathError: If ``root`` does not exist or is not a directory
        """
        root = Path(root)
        if not root.exists():
            raise InvalidPathError(root, "path does not exist")
        if not root.is_dir():
            raise InvalidPathError(root, "not a directory")
        root = root.resolve()

        stats = ScanStatistics(start_time=time.time())
        driver_metrics: Dict[str, MetricRecord] = {}
        aggregate = base_metrics()
        visited: Set[Tuple[int, int]] = set()

        logger.info(f"Analyzing {root}")
        self._walk_directory(root, root, project, stats, driver_metrics, aggregate, visited)
        stats.end_time = time.time()

        logger.info(
            f"Analyzed {stats.analyzed_files} of {stats.total_files} files "
            f"({stats.skipped_files} skipped, {stats.parse_errors} parse errors)"
        )
        return AnalysisResult(
            root=root,
            stats=stats,
            driver_metrics=driver_metrics,
            aggregate=aggregate,
            drivers=self.registry,
            project=project,
        )

    def _walk_directory(
        self,
        root: Path,
        directory: Path,
        project: Optional[ProjectContext],
        stats: ScanStatistics,
        driver_metrics: Dict[str, MetricRecord],
        aggregate: MetricRecord,
        visited: Set[Tuple[int, int]],
    ) -> None:
        if self.follow_symlinks:
            try:
                info = directory.stat()
            except OSError as e:
                logger.warning(f"Cannot stat {directory}: {e}")
                return
            inode = (info.st_dev, info.st_ino)
            if inode in visited:
                logger.debug(f"Skipping already visited directory {directory}")
                return
            visited.add(inode)

        stats.directories.add(str(directory))

        try:
            entries: List[os.DirEntry] = sorted(os.scandir(directory), key=lambda e: e.name)
        except OSError as e:
            logger.warning(f"Cannot list {directory}: {e}")
            return

        for entry in entries:
            path = Path(entry.path)
            relative = path.relative_to(root).as_posix()
            if self.should_ignore(entry.name, relative):
                logger.debug(f"Ignoring {relative}")
                continue

            try:
                is_dir = entry.is_dir(follow_symlinks=self.follow_symlinks)
                is_file = entry.is_file(follow_symlinks=self.follow_symlinks)
            except OSError as e:
                logger.warning(f"Cannot stat {path}: {e}")
                continue

            if is_dir:
                self._walk_directory(root, path, project, stats, driver_metrics, aggregate, visited)
            elif is_file:
                self._analyze_file(path, project, stats, driver_metrics, aggregate)

    def _analyze_file(
        self,
        path: Path,
        project: Optional[ProjectContext],
        stats: ScanStatistics,
        driver_metrics: Dict[str, MetricRecord],
        aggregate: MetricRecord,
    ) -> None:
        stats.total_files += 1

        driver = self.registry.resolve(path, project)
        if driver is None:
            logger.debug(f"No driver for {path}")
            stats.skipped_files += 1
            return

        if self.max_file_size is not None:
            try:
                size = path.stat().st_size
            except OSError as e:
                logger.warning(f"Cannot stat {path}: {e}")
                stats.skipped_files += 1
                return
            if size > self.max_file_size:
                logger.debug(f"Skipping {path}: {size} bytes exceeds size limit")
                stats.skipped_files += 1
                return

        try:
            content = read_source(path)
        except FileAccessError as e:
            logger.warning(str(e))
            stats.skipped_files += 1
            return

        try:
            record = driver.parse(content, path, project)
        except Exception as e:
            logger.error(str(ParsingError(path, driver.name, str(e))))
            stats.skipped_files += 1
            return

        if is_error_record(record):
            logger.debug(f"{driver.name} could not parse {path}")
            stats.parse_errors += 1

        if driver.name not in driver_metrics:
            driver_metrics[driver.name] = driver.initial_metrics()
        merge_metrics(driver_metrics[driver.name], record)
        merge_metrics(aggregate, record)
        stats.analyzed_files += 1
