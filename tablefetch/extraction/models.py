"""Data models for the extraction pipeline."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Iterable, Mapping, Sequence

import pandas as pd
from bs4 import BeautifulSoup

from .errors import ColumnLengthMismatchError, MalformedInputError, SelectorMatchError

JsonValue = dict[str, "JsonValue"] | list["JsonValue"] | str | int | float | bool | None

_INT_RE = re.compile(r"[+-]?\d+")
_FLOAT_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_GROUPED_RE = re.compile(r"[+-]?\d{1,3}(,\d{3})+(\.\d+)?")


class DocumentFormat(str, Enum):
    HTML = "html"
    CSV = "csv"
    JSON = "json"


@dataclass(frozen=True)
class FetchResult:
    """A single HTTP response body, discarded once parsed."""

    url: str
    status_code: int
    content_type: str
    content: bytes
    encoding: str | None = None

    @property
    def text(self) -> str:
        return self.content.decode(self.encoding or "utf-8")


@dataclass(frozen=True, eq=False)
class HtmlDocument:
    format: ClassVar[DocumentFormat] = DocumentFormat.HTML

    soup: BeautifulSoup


@dataclass(frozen=True, eq=False)
class CsvDocument:
    format: ClassVar[DocumentFormat] = DocumentFormat.CSV

    frame: pd.DataFrame
    header: bool = False


@dataclass(frozen=True)
class JsonDocument:
    format: ClassVar[DocumentFormat] = DocumentFormat.JSON

    value: JsonValue


ParsedDocument = HtmlDocument | CsvDocument | JsonDocument


def _coerce_column(values: Sequence[Any]) -> list[Any]:
    """Convert a column of strings to ints or floats when every cell parses.

    Blank strings become ``None`` in converted columns only; a column that
    stays text is returned unchanged.
    """
    stripped = [v.strip() if isinstance(v, str) else v for v in values]
    texts = [v for v in stripped if isinstance(v, str) and v]
    if not texts or any(v is not None and not isinstance(v, str) for v in stripped):
        return list(values)

    candidates = {t: t.replace(",", "") if _GROUPED_RE.fullmatch(t) else t for t in texts}
    if all(_INT_RE.fullmatch(c) for c in candidates.values()):
        convert: Any = int
    elif all(_FLOAT_RE.fullmatch(c) for c in candidates.values()):
        convert = float
    else:
        return list(values)
    return [convert(candidates[v]) if v else None for v in stripped]


@dataclass(frozen=True)
class ResultTable:
    """Ordered, named, equal-length columns.

    Construction fails with :class:`ColumnLengthMismatchError` if any two
    columns differ in length; nothing is ever padded or truncated here.
    """

    columns: Mapping[str, Sequence[Any]]

    def __post_init__(self) -> None:
        normalized = {str(name): tuple(values) for name, values in self.columns.items()}
        lengths = {name: len(values) for name, values in normalized.items()}
        if len(set(lengths.values())) > 1:
            raise ColumnLengthMismatchError(lengths)
        object.__setattr__(self, "columns", normalized)

    @classmethod
    def from_rows(cls, header: Sequence[str], rows: Iterable[Sequence[Any]]) -> ResultTable:
        width = len(header)
        if len(set(header)) != width:
            raise MalformedInputError(f"duplicate column names in header {list(header)}")
        data: list[list[Any]] = [[] for _ in range(width)]
        for i, row in enumerate(rows):
            if len(row) != width:
                raise MalformedInputError(f"row {i} has {len(row)} cells, expected {width}")
            for j, value in enumerate(row):
                data[j].append(value)
        return cls(dict(zip(header, data)))

    @classmethod
    def from_frame(cls, frame: pd.DataFrame) -> ResultTable:
        """Build a table from a DataFrame, mapping NaN/NA cells to ``None``."""
        return cls(
            {
                str(name): [None if pd.isna(v) else v for v in frame[name].tolist()]
                for name in frame.columns
            }
        )

    @classmethod
    def concat(cls, tables: Sequence[ResultTable]) -> ResultTable:
        """Stack tables that share the same column names, in order."""
        if not tables:
            return cls({})
        names = tables[0].names
        for table in tables[1:]:
            if table.names != names:
                raise MalformedInputError(
                    f"cannot concatenate tables with columns {table.names} onto {names}"
                )
        return cls({name: [v for t in tables for v in t.columns[name]] for name in names})

    @property
    def names(self) -> list[str]:
        return list(self.columns)

    @property
    def num_rows(self) -> int:
        return len(next(iter(self.columns.values()), ()))

    def __len__(self) -> int:
        return self.num_rows

    def column(self, name: str) -> list[Any]:
        return list(self.columns[name])

    def rows(self) -> list[tuple[Any, ...]]:
        return list(zip(*self.columns.values()))

    def records(self) -> list[dict[str, Any]]:
        names = self.names
        return [dict(zip(names, row)) for row in self.rows()]

    def drop_rows(self, *indices: int) -> ResultTable:
        """Return a copy without the given rows (negative indices count from the end)."""
        n = self.num_rows
        dropped = set()
        for index in indices:
            if not -n <= index < n:
                raise SelectorMatchError(f"row index {index} out of range for {n} rows")
            dropped.add(index % n)
        return ResultTable(
            {
                name: [v for i, v in enumerate(values) if i not in dropped]
                for name, values in self.columns.items()
            }
        )

    def head(self, n: int) -> ResultTable:
        return ResultTable({name: values[:n] for name, values in self.columns.items()})

    def repeated_rows(self) -> list[int]:
        """Indices of rows that repeat one non-empty value across every column.

        These are typically footnotes spanning the whole table. They are only
        reported here; removing them is up to the caller via :meth:`drop_rows`.
        """
        if len(self.columns) < 2:
            return []
        found = []
        for i, row in enumerate(self.rows()):
            first = row[0]
            if first not in (None, "") and all(cell == first for cell in row[1:]):
                found.append(i)
        return found

    def infer_types(self) -> ResultTable:
        return ResultTable({name: _coerce_column(values) for name, values in self.columns.items()})

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({name: list(values) for name, values in self.columns.items()})
