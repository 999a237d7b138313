"""Error types raised by epiwrangle.

All of them subclass ``ValueError`` so that callers already catching
``ValueError`` around pandas code keep working.
"""


class EpiWrangleError(ValueError):
    """Base class for all epiwrangle errors."""


class SchemaError(EpiWrangleError):
    """A table lacks required columns or a column has the wrong type."""


class ConfigurationError(EpiWrangleError):
    """Caller-supplied options (shifts, layout, method...) are malformed."""


class FormatError(EpiWrangleError):
    """A wide-layout column name does not follow the value column grammar."""

    def __init__(self, column: str, message: str = None):
        self.column = column
        super().__init__(message or f"Cannot parse value column name: {column!r}")
