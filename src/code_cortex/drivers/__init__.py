"""File-type drivers.

Each driver claims files by extension or basename pattern and turns their
content into a metric record. Specialized drivers extend a base driver with
extra layers and a higher priority, so the resolver prefers them.
"""

from .base import (
    Driver,
    DriverDescriptor,
    ExtractionContext,
    Layer,
    Sections,
    merge_sections,
    scoped,
)
from .javascript import JAVASCRIPT, REACT, REACT_TYPESCRIPT, TYPESCRIPT
from .json import COMPOSER_JSON, JSON, PACKAGE_JSON
from .laravel import LARAVEL
from .php import BLADE, PHP
from .vue import VUE

# Drivers registered for every analysis; Laravel is added in Laravel mode.
BUILTIN_DRIVERS = [
    PHP,
    BLADE,
    JAVASCRIPT,
    TYPESCRIPT,
    REACT,
    REACT_TYPESCRIPT,
    VUE,
    JSON,
    PACKAGE_JSON,
    COMPOSER_JSON,
]

__all__ = [
    "Driver",
    "DriverDescriptor",
    "ExtractionContext",
    "Layer",
    "Sections",
    "merge_sections",
    "scoped",
    "BUILTIN_DRIVERS",
    "PHP",
    "BLADE",
    "JAVASCRIPT",
    "TYPESCRIPT",
    "REACT",
    "REACT_TYPESCRIPT",
    "VUE",
    "JSON",
    "PACKAGE_JSON",
    "COMPOSER_JSON",
    "LARAVEL",
]
