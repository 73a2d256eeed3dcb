"""Column assembly into a ResultTable."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from .models import CsvDocument, ResultTable


def assemble(columns: Mapping[str, Sequence[Any]]) -> ResultTable:
    """Align columns by position into one table, keeping the caller's order.

    Raises :class:`ColumnLengthMismatchError` if any two columns differ in
    length.
    """
    return ResultTable(columns)


def csv_table(doc: CsvDocument, *, infer_types: bool = True) -> ResultTable:
    """Turn a parsed CSV into a table.

    Cells arrive as text; with ``infer_types=False`` they stay that way so the
    caller can trim rows before typing.
    """
    table = ResultTable.from_frame(doc.frame)
    return table.infer_types() if infer_types else table
