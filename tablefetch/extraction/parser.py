"""Turn a FetchResult into a format-specific ParsedDocument."""

from __future__ import annotations

import io
import json
import logging

import pandas as pd
from bs4 import BeautifulSoup, ParserRejectedMarkup

from .errors import MalformedInputError
from .models import (
    CsvDocument,
    DocumentFormat,
    FetchResult,
    HtmlDocument,
    JsonDocument,
    ParsedDocument,
)

logger = logging.getLogger(__name__)

_CONTENT_TYPES = {
    "text/html": DocumentFormat.HTML,
    "application/xhtml+xml": DocumentFormat.HTML,
    "text/csv": DocumentFormat.CSV,
    "application/csv": DocumentFormat.CSV,
    "application/json": DocumentFormat.JSON,
    "text/json": DocumentFormat.JSON,
}


def detect_format(content_type: str) -> DocumentFormat:
    """Map a Content-Type header value to a :class:`DocumentFormat`."""
    mime = content_type.split(";", 1)[0].strip().lower()
    if mime in _CONTENT_TYPES:
        return _CONTENT_TYPES[mime]
    if mime.endswith("+json"):
        return DocumentFormat.JSON
    raise MalformedInputError(f"cannot infer document format from content type {content_type!r}")


def _decode(result: FetchResult) -> str:
    try:
        return result.text
    except (UnicodeDecodeError, LookupError) as exc:
        raise MalformedInputError(f"body of {result.url} is not valid {result.encoding or 'utf-8'}") from exc


def parse_html(result: FetchResult) -> HtmlDocument:
    try:
        soup = BeautifulSoup(result.content, "html.parser", from_encoding=result.encoding)
    except ParserRejectedMarkup as exc:
        raise MalformedInputError(f"unparsable HTML from {result.url}") from exc
    return HtmlDocument(soup)


def parse_csv(result: FetchResult, *, header: bool = False, delimiter: str = ",") -> CsvDocument:
    """Read every cell as text; typing is left to :meth:`ResultTable.infer_types`."""
    text = _decode(result)
    try:
        frame = pd.read_csv(
            io.StringIO(text),
            sep=delimiter,
            header=0 if header else None,
            dtype=str,
            keep_default_na=False,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise MalformedInputError(f"unparsable CSV from {result.url}: {exc}") from exc
    if not header:
        frame.columns = [f"X{i + 1}" for i in range(len(frame.columns))]
    return CsvDocument(frame=frame, header=header)


def parse_json(result: FetchResult) -> JsonDocument:
    text = _decode(result)
    try:
        value = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedInputError(f"invalid JSON from {result.url}: {exc}") from exc
    return JsonDocument(value)


def parse(
    result: FetchResult,
    format: DocumentFormat | str | None = None,
    *,
    header: bool = False,
    delimiter: str = ",",
) -> ParsedDocument:
    """Parse *result* as *format*, inferring it from the content type when omitted.

    ``header`` and ``delimiter`` only apply to CSV.
    """
    fmt = detect_format(result.content_type) if format is None else DocumentFormat(format)
    if fmt is DocumentFormat.HTML:
        doc: ParsedDocument = parse_html(result)
    elif fmt is DocumentFormat.CSV:
        doc = parse_csv(result, header=header, delimiter=delimiter)
    else:
        doc = parse_json(result)
    logger.debug("parsed document", extra={"url": result.url, "format": fmt.value})
    return doc
