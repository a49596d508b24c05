"""Exception hierarchy for Code Cortex."""

from .analysis import (
    AnalysisError,
    DriverRegistrationError,
    FileAccessError,
    ParsingError,
)
from .base import CodeCortexError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)

__all__ = [
    "CodeCortexError",
    "AnalysisError",
    "FileAccessError",
    "ParsingError",
    "DriverRegistrationError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
]
