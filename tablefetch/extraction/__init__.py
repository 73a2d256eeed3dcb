"""Structured web extraction: fetch, parse, extract and assemble tables."""

from __future__ import annotations

from .assembler import assemble, csv_table
from .errors import (
    ColumnLengthMismatchError,
    ExtractionError,
    MalformedInputError,
    NetworkError,
    PathNotFoundError,
    SelectorMatchError,
)
from .fetcher import Fetcher, FetchRequest, fetch
from .html import attr_of, extract_elements, extract_table, extract_tables, text_of
from .jsonpath import extract_path, records_table
from .models import (
    CsvDocument,
    DocumentFormat,
    FetchResult,
    HtmlDocument,
    JsonDocument,
    ParsedDocument,
    ResultTable,
)
from .parser import detect_format, parse
from .pipeline import ExtractionRecipe, FieldSpec, arun, arun_many, build_table, run, run_paged
from .registry import ExtractorRegistry, build_default_registry, extract
from .selectors import CssSelector, JsonPath, TableIndex

__all__ = [
    "ColumnLengthMismatchError",
    "CssSelector",
    "CsvDocument",
    "DocumentFormat",
    "ExtractionError",
    "ExtractionRecipe",
    "ExtractorRegistry",
    "FetchRequest",
    "FetchResult",
    "Fetcher",
    "FieldSpec",
    "HtmlDocument",
    "JsonDocument",
    "JsonPath",
    "MalformedInputError",
    "NetworkError",
    "ParsedDocument",
    "PathNotFoundError",
    "ResultTable",
    "SelectorMatchError",
    "TableIndex",
    "arun",
    "arun_many",
    "assemble",
    "attr_of",
    "build_default_registry",
    "build_table",
    "csv_table",
    "detect_format",
    "extract",
    "extract_elements",
    "extract_path",
    "extract_table",
    "extract_tables",
    "fetch",
    "parse",
    "records_table",
    "run",
    "run_paged",
    "text_of",
]
