"""Exception hierarchy for the extraction pipeline."""

from __future__ import annotations


class ExtractionError(Exception):
    """Base class for every error raised by the pipeline."""


class NetworkError(ExtractionError):
    """Connection failure, timeout, or a non-2xx response."""

    def __init__(self, message: str, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class MalformedInputError(ExtractionError):
    """Raw content could not be parsed in the declared format."""


class PathNotFoundError(ExtractionError):
    """A JSON path segment is missing or does not fit the value it indexes."""

    def __init__(self, message: str, path: tuple[str | int, ...], position: int) -> None:
        super().__init__(message)
        self.path = path
        self.position = position


class ColumnLengthMismatchError(ExtractionError):
    """Columns handed to a table have different lengths."""

    def __init__(self, lengths: dict[str, int]) -> None:
        detail = ", ".join(f"{name}={n}" for name, n in lengths.items())
        super().__init__(f"column lengths differ: {detail}")
        self.lengths = lengths


class SelectorMatchError(ExtractionError):
    """A selector matched nothing where a match was required, or cannot apply."""
