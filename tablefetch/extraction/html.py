"""HTML extraction: tables, CSS-selected elements, node text and attributes."""

from __future__ import annotations

import logging
from typing import Iterator

from bs4 import Comment, NavigableString, Tag
from soupsieve import SelectorSyntaxError

from .errors import SelectorMatchError
from .models import HtmlDocument, ResultTable
from .selectors import CssSelector

logger = logging.getLogger(__name__)

_BLOCK_TAGS = frozenset(
    {"br", "p", "div", "li", "tr", "td", "th", "h1", "h2", "h3", "h4", "h5", "h6", "section", "article"}
)
_INVISIBLE_PARENTS = frozenset({"script", "style", "template"})


def _iter_visible_text(node: Tag) -> Iterator[str]:
    for child in node.descendants:
        if isinstance(child, NavigableString):
            if isinstance(child, Comment):
                continue
            if child.parent is not None and child.parent.name in _INVISIBLE_PARENTS:
                continue
            yield str(child)
        elif isinstance(child, Tag) and child.name in _BLOCK_TAGS:
            yield " "


def text_of(node: Tag, *, normalize: bool = False) -> str:
    """Return the text content of *node*.

    With ``normalize=False`` this is the literal concatenation of every text
    node. With ``normalize=True`` script/style content is skipped, block
    boundaries and ``<br>`` count as whitespace, and whitespace runs collapse
    to single spaces with the ends stripped.
    """
    if not normalize:
        return node.get_text()
    return " ".join("".join(_iter_visible_text(node)).split())


def attr_of(node: Tag, name: str) -> str | None:
    """Return attribute *name* of *node*, or ``None`` when it is absent."""
    value = node.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def extract_elements(
    doc: HtmlDocument,
    selector: CssSelector | str,
    *,
    required: bool = False,
) -> list[Tag]:
    """All nodes matching a CSS selector, in document order."""
    expr = selector.expr if isinstance(selector, CssSelector) else selector
    try:
        nodes = doc.soup.select(expr)
    except SelectorSyntaxError as exc:
        raise SelectorMatchError(f"invalid CSS selector {expr!r}: {exc}") from exc
    if required and not nodes:
        raise SelectorMatchError(f"CSS selector {expr!r} matched no elements")
    logger.debug("css selector matched", extra={"selector": expr, "match_count": len(nodes)})
    return nodes


def _span(cell: Tag, name: str) -> int:
    try:
        return max(1, int(attr_of(cell, name) or 1))
    except ValueError:
        return 1


def _own_rows(table: Tag) -> list[Tag]:
    return [tr for tr in table.find_all("tr") if tr.find_parent("table") is table]


def _expand_grid(rows: list[Tag]) -> list[list[str | None]]:
    """Lay cells out on a grid, repeating values across colspan and rowspan."""
    grid: list[list[str | None]] = []
    carried: dict[int, tuple[int, str]] = {}
    for tr in rows:
        queue = tr.find_all(["td", "th"], recursive=False)
        row: list[str | None] = []
        col = 0
        while queue or any(c >= col for c in carried):
            if col in carried:
                left, value = carried.pop(col)
                if left > 1:
                    carried[col] = (left - 1, value)
                row.append(value)
                col += 1
                continue
            if not queue:
                row.append(None)
                col += 1
                continue
            cell = queue.pop(0)
            text = text_of(cell, normalize=True)
            rowspan = _span(cell, "rowspan")
            for _ in range(_span(cell, "colspan")):
                if rowspan > 1:
                    carried[col] = (rowspan - 1, text)
                row.append(text)
                col += 1
        grid.append(row)
    return grid


def _header_names(cells: list[str | None]) -> list[str]:
    names: list[str] = []
    used: set[str] = set()
    for i, cell in enumerate(cells):
        base = cell or f"X{i + 1}"
        name, n = base, 1
        while name in used:
            n += 1
            name = f"{base}_{n}"
        used.add(name)
        names.append(name)
    return names


def table_from_element(table: Tag, *, header: bool = True) -> ResultTable:
    """Convert one ``<table>`` element into a :class:`ResultTable`.

    Short rows are padded with ``None`` up to the widest row, so every row
    has the same column count. Cell text is normalized but not type-converted;
    call :meth:`ResultTable.infer_types` once any footnote rows are dropped.
    """
    grid = _expand_grid(_own_rows(table))
    if not grid:
        return ResultTable({})
    width = max(len(row) for row in grid)
    grid = [row + [None] * (width - len(row)) for row in grid]
    if header:
        names, body = _header_names(grid[0]), grid[1:]
    else:
        names, body = [f"X{i + 1}" for i in range(width)], grid
    return ResultTable.from_rows(names, body)


def extract_tables(doc: HtmlDocument, *, header: bool = True) -> list[ResultTable]:
    """One table per ``<table>`` element, in document order."""
    tables = [table_from_element(t, header=header) for t in doc.soup.find_all("table")]
    logger.debug("extracted html tables", extra={"table_count": len(tables)})
    return tables


def extract_table(doc: HtmlDocument, index: int, *, header: bool = True) -> ResultTable:
    elements = doc.soup.find_all("table")
    if not -len(elements) <= index < len(elements):
        raise SelectorMatchError(f"table index {index} out of range; document has {len(elements)} tables")
    return table_from_element(elements[index], header=header)
