"""Driver framework: descriptors, layers and the composed Driver.

A driver is a descriptor (which files it claims) plus an ordered tuple of
layers (what it extracts). Each layer is a pure function of a shared
:class:`ExtractionContext` returning part of a metric record; ``parse``
applies the layers in order and shallow-unions their output, later layers
winning on key collisions.

Specialization is composition. ``base.specialize(...)`` builds a new driver
whose layers are the base's followed by new ones, so a file claimed by the
most specific driver still reports every metric of its ancestors::

    TYPESCRIPT = JAVASCRIPT.specialize("TypeScript", TS_LAYER, extensions={".ts"}, priority=15)

A ``narrow`` function scopes the inherited layers to part of the content
(the script block of a single-file component, for example).
"""

import json
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, Iterable, Optional, Tuple, Union

from ..metrics.record import MetricRecord, base_metrics
from ..project import ProjectContext

Sections = Dict[str, Dict[str, Any]]
PathLike = Union[str, Path]
ProjectGate = Callable[[ProjectContext], bool]

_INHERIT: Any = object()
_UNSET: Any = object()


def _compile_all(patterns: Iterable[Union[str, "re.Pattern[str]"]]) -> Tuple["re.Pattern[str]", ...]:
    return tuple(re.compile(p) if isinstance(p, str) else p for p in patterns)


@dataclass(frozen=True)
class DriverDescriptor:
    """Which files a driver claims, and how strongly.

    ``name`` is the key under which the driver's aggregate is kept; no two
    registered drivers may share it.
    """

    name: str
    extensions: FrozenSet[str] = frozenset()
    include_patterns: Tuple["re.Pattern[str]", ...] = ()
    exclude_patterns: Tuple["re.Pattern[str]", ...] = ()
    priority: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "extensions", frozenset(self.extensions))
        object.__setattr__(self, "include_patterns", _compile_all(self.include_patterns))
        object.__setattr__(self, "exclude_patterns", _compile_all(self.exclude_patterns))

    def matches(self, path: PathLike) -> bool:
        """Default claim policy.

        Exclude patterns veto; include patterns, when present, fully replace
        extension matching. Patterns are searched in the basename only.
        """
        path = Path(path)
        name = path.name

        if any(p.search(name) for p in self.exclude_patterns):
            return False
        if self.include_patterns:
            return any(p.search(name) for p in self.include_patterns)
        return path.suffix in self.extensions


class ExtractionContext:
    """Content of one file plus lazily computed views shared by all layers."""

    def __init__(
        self, content: str, path: PathLike, project: Optional[ProjectContext] = None
    ):
        self.content = content
        self.path = Path(path)
        self.project = project
        self._stripped: Dict[Tuple["re.Pattern[str]", ...], str] = {}
        self._json: Any = _UNSET
        self._json_error: Optional[ValueError] = None

    def stripped(self, patterns: Tuple["re.Pattern[str]", ...]) -> str:
        """Content with every match of ``patterns`` removed, applied in order."""
        if patterns not in self._stripped:
            clean = self.content
            for pattern in patterns:
                clean = pattern.sub("", clean)
            self._stripped[patterns] = clean
        return self._stripped[patterns]

    def decode_json(self) -> Any:
        """Parsed JSON content.

        Raises:
            ValueError: If the content is not valid JSON (raised on every call)
        """
        if self._json is _UNSET and self._json_error is None:
            try:
                self._json = json.loads(self.content)
            except ValueError as e:
                self._json_error = e
        if self._json_error is not None:
            raise self._json_error
        return self._json

    def narrow(self, content: str) -> "ExtractionContext":
        """A fresh context over ``content`` for the same file and project."""
        return ExtractionContext(content, self.path, self.project)


@dataclass(frozen=True)
class Layer:
    """One slice of extraction logic and the report sections it owns."""

    name: str
    extract: Callable[[ExtractionContext], MetricRecord]
    sections: Optional[Callable[[MetricRecord], Sections]] = None


def share(value: Any, total: Any) -> Dict[str, float]:
    """A section value rendered as ``value (percentage%)``."""
    value = value or 0
    return {"value": value, "percentage": value / total * 100 if total else 0}


def detected(flags: Any) -> list:
    """Names whose flag is set in a ``{name: bool}`` mapping."""
    if not isinstance(flags, dict):
        return []
    return [name for name, present in flags.items() if present]


def merge_sections(into: Sections, extra: Sections) -> Sections:
    for title, fields in extra.items():
        into.setdefault(title, {}).update(fields)
    return into


def scoped(name: str, layers: Tuple[Layer, ...], narrow: Callable[[ExtractionContext], ExtractionContext]) -> Layer:
    """Wrap ``layers`` so they run on the context returned by ``narrow``."""

    def extract(ctx: ExtractionContext) -> MetricRecord:
        inner = narrow(ctx)
        record: MetricRecord = {}
        for layer in layers:
            record.update(layer.extract(inner))
        return record

    def sections(aggregate: MetricRecord) -> Sections:
        out: Sections = {}
        for layer in layers:
            if layer.sections is not None:
                merge_sections(out, layer.sections(aggregate))
        return out

    return Layer(name=name, extract=extract, sections=sections)


@dataclass(frozen=True)
class Driver:
    """A descriptor plus the layers that turn file content into a record.

    Drivers hold no per-file state: everything project-specific arrives
    through the :class:`ProjectContext` argument.
    """

    descriptor: DriverDescriptor
    layers: Tuple[Layer, ...] = ()
    extends: Optional[str] = None
    requires: Optional[ProjectGate] = field(default=None, compare=False)

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def priority(self) -> int:
        return self.descriptor.priority

    @property
    def extensions(self) -> FrozenSet[str]:
        return self.descriptor.extensions

    @property
    def include_patterns(self) -> Tuple["re.Pattern[str]", ...]:
        return self.descriptor.include_patterns

    @property
    def exclude_patterns(self) -> Tuple["re.Pattern[str]", ...]:
        return self.descriptor.exclude_patterns

    def can_handle(self, path: PathLike, project: Optional[ProjectContext] = None) -> bool:
        if self.requires is not None and (project is None or not self.requires(project)):
            return False
        return self.descriptor.matches(path)

    def parse(
        self, content: str, path: PathLike, project: Optional[ProjectContext] = None
    ) -> MetricRecord:
        ctx = ExtractionContext(content, path, project)
        record: MetricRecord = {}
        for layer in self.layers:
            record.update(layer.extract(ctx))
        return record

    def format_metrics(self, aggregate: MetricRecord) -> Sections:
        sections: Sections = {}
        for layer in self.layers:
            if layer.sections is not None:
                merge_sections(sections, layer.sections(aggregate))
        return sections

    def initial_metrics(self) -> MetricRecord:
        return base_metrics()

    def specialize(
        self,
        name: str,
        *layers: Layer,
        narrow: Optional[Callable[[ExtractionContext], ExtractionContext]] = None,
        requires: Any = _INHERIT,
        **overrides: Any,
    ) -> "Driver":
        """Derive a driver that extends this one with extra layers.

        ``overrides`` replace descriptor fields (``extensions``,
        ``include_patterns``, ``exclude_patterns``, ``priority``); the rest
        are inherited.
        """
        inherited = self.layers
        if narrow is not None:
            inherited = (scoped(self.name, self.layers, narrow),)

        return Driver(
            descriptor=replace(self.descriptor, name=name, **overrides),
            layers=inherited + tuple(layers),
            extends=self.name,
            requires=self.requires if requires is _INHERIT else requires,
        )

    def __repr__(self) -> str:
        return f"Driver({self.name!r}, priority={self.priority})"
