"""Error taxonomy.

Data failures (InvalidEncoding, UpstreamIOError) travel inside a stream's
terminal Status; stages never raise them. ConfigurationError only exists at the
catalog/config/CLI boundary. StreamProtocolError signals misuse of a Stream.
"""

from __future__ import annotations
from typing import Optional


class CleanTextError(Exception):
    """Base class for all clean_text errors."""


class InvalidEncoding(CleanTextError):
    """The byte source is not valid UTF-8 at ``position``."""

    def __init__(self, position: int):
        super().__init__(f"invalid UTF-8 at byte {position}")
        self.position = position


class UpstreamIOError(CleanTextError):
    """Reading the byte source (or writing the output) failed."""

    def __init__(self, message: str, cause: Optional[OSError] = None):
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.cause = cause
        self.__cause__ = cause


class ConfigurationError(CleanTextError):
    """Unknown catalog key or invalid configuration."""


class StreamProtocolError(CleanTextError):
    """A Stream was used against its contract (e.g. status read before drain)."""
