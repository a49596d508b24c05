"""Analysis-related exceptions: file access, parsing, driver registration."""

from pathlib import Path
from typing import Any

from .base import CodeCortexError


class AnalysisError(CodeCortexError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a file or directory cannot be accessed or read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class ParsingError(AnalysisError):
    """Raised when a driver fails unexpectedly while parsing a file."""

    def __init__(self, filepath: Path, driver: str, reason: str):
        super().__init__(
            f"{driver} driver failed on {filepath}",
            details={"filepath": str(filepath), "driver": driver, "reason": reason},
        )
        self.filepath = filepath
        self.driver = driver
        self.reason = reason


class DriverRegistrationError(AnalysisError):
    """Raised when an object cannot be registered as a driver."""

    def __init__(self, driver: Any, reason: str):
        name = getattr(driver, "name", type(driver).__name__)
        super().__init__(
            f"Cannot register driver: {name}",
            details={"driver": str(name), "reason": reason},
        )
        self.driver = driver
        self.reason = reason
