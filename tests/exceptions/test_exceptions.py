"""Tests for the Code Cortex exception hierarchy."""

from pathlib import Path

import pytest

from code_cortex.exceptions import (
    AnalysisError,
    CodeCortexError,
    ConfigurationError,
    DriverRegistrationError,
    FileAccessError,
    InvalidConfigError,
    InvalidPathError,
    ParsingError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error,parent",
        [
            (FileAccessError(Path("a.php"), "denied"), AnalysisError),
            (ParsingError(Path("a.php"), "PHP", "boom"), AnalysisError),
            (DriverRegistrationError(object(), "bad"), AnalysisError),
            (InvalidPathError(Path("missing"), "gone"), ConfigurationError),
            (InvalidConfigError("analyzer", "x", "unknown"), ConfigurationError),
        ],
    )
    def test_parents(self, error, parent):
        assert isinstance(error, parent)
        assert isinstance(error, CodeCortexError)


class TestMessages:
    def test_details_are_rendered(self):
        error = FileAccessError(Path("a.php"), "permission denied")
        assert str(error) == "Cannot access file: a.php (filepath=a.php, reason=permission denied)"

    def test_plain_message(self):
        assert str(CodeCortexError("plain")) == "plain"

    def test_parsing_error_names_driver(self):
        error = ParsingError(Path("x.json"), "JSON", "unexpected")
        assert error.driver == "JSON"
        assert "JSON driver failed on x.json" in str(error)

    def test_registration_error_uses_driver_name(self):
        class Named:
            name = "Fake"

        error = DriverRegistrationError(Named(), "not a Driver instance")
        assert error.details["driver"] == "Fake"
