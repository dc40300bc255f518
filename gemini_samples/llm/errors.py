"""Domain-specific error types for the LLM module."""

from pathlib import Path


class ConfigError(Exception):
    """Missing credential or invalid client configuration."""


class InputFileError(IOError):
    """Local input file could not be read.

    Attributes:
        path: Path of the file that failed to load.
    """

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(message)
        self.path = path


class ProviderError(Exception):
    """Gemini API call failure (network, HTTP status, or malformed payload).

    Attributes:
        status_code: HTTP status code from the API response, 0 if none.
    """

    def __init__(self, message: str, status_code: int = 0) -> None:
        super().__init__(message)
        self.status_code = status_code
