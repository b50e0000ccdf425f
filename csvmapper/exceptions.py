"""Exception hierarchy for the CSV mapper.

Only configuration problems are raised as errors. Bad cell data degrades into
NaN or None values, and file read failures surface as the built-in OSError.
"""


class CsvMapperError(Exception):
    """Base class for every exception raised by csvmapper."""


class ConfigurationError(CsvMapperError):
    """Raised when a mapper is configured inconsistently."""


class DuplicateColumnError(ConfigurationError):
    """Raised when a second mapping is registered for the same source field."""

    def __init__(self, source: str):
        super().__init__(f"Mapping already defined for column {source.strip()!r}")
        self.source = source
