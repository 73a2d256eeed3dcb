"""JSON traversal and JSON-to-table conversion."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from .errors import MalformedInputError, PathNotFoundError
from .models import JsonDocument, JsonValue, ResultTable
from .selectors import JsonPath

logger = logging.getLogger(__name__)


def _type_name(value: Any) -> str:
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    if value is None:
        return "null"
    return type(value).__name__


def extract_path(
    doc: JsonDocument | JsonValue,
    path: JsonPath | Sequence[str | int],
) -> JsonValue:
    """Follow *path* through a JSON value.

    String segments only index objects and integer segments only index
    arrays (negative indices count from the end). Anything else, or a
    missing key or index, raises :class:`PathNotFoundError`.
    """
    value = doc.value if isinstance(doc, JsonDocument) else doc
    segments = path.segments if isinstance(path, JsonPath) else tuple(path)

    for position, segment in enumerate(segments):
        if isinstance(segment, bool):
            raise PathNotFoundError(f"invalid path segment {segment!r}", segments, position)
        if isinstance(segment, str):
            if not isinstance(value, dict):
                raise PathNotFoundError(
                    f"cannot look up key {segment!r} in {_type_name(value)}", segments, position
                )
            if segment not in value:
                raise PathNotFoundError(f"key {segment!r} not found", segments, position)
            value = value[segment]
        elif isinstance(segment, int):
            if not isinstance(value, list):
                raise PathNotFoundError(
                    f"cannot index {_type_name(value)} with {segment}", segments, position
                )
            if not -len(value) <= segment < len(value):
                raise PathNotFoundError(
                    f"index {segment} out of range for array of {len(value)}", segments, position
                )
            value = value[segment]
        else:
            raise PathNotFoundError(f"invalid path segment {segment!r}", segments, position)
    return value


def records_table(value: JsonValue) -> ResultTable:
    """Convert an array of JSON objects into a table.

    Columns follow the order in which keys are first seen; objects missing a
    key contribute ``None`` for it.
    """
    if not isinstance(value, list):
        raise MalformedInputError(f"expected an array of objects, got {_type_name(value)}")
    names: dict[str, None] = {}
    for i, record in enumerate(value):
        if not isinstance(record, dict):
            raise MalformedInputError(f"element {i} is {_type_name(record)}, expected object")
        names.update(dict.fromkeys(record))
    table = ResultTable({name: [record.get(name) for record in value] for name in names})
    logger.debug("built table from json records", extra={"rows": table.num_rows, "columns": len(names)})
    return table
