"""Declarative selector values consumed by the extractor registry."""

from __future__ import annotations

import re
from dataclasses import dataclass

_SEGMENT_RE = re.compile(r"([^.\[\]]+)|\[(-?\d+)\]")


@dataclass(frozen=True)
class CssSelector:
    expr: str


@dataclass(frozen=True)
class TableIndex:
    """Zero-based ordinal of a ``<table>`` in document order."""

    index: int
    header: bool = True


@dataclass(frozen=True)
class JsonPath:
    segments: tuple[str | int, ...] = ()

    @classmethod
    def parse(cls, text: str) -> JsonPath:
        """Parse ``"data.items[0].name"`` into ``("data", "items", 0, "name")``.

        A dotted segment made of digits stays a string key; only bracketed
        numbers index arrays.
        """
        segments: list[str | int] = []
        pos = 0
        while pos < len(text):
            if text[pos] == ".":
                pos += 1
                continue
            match = _SEGMENT_RE.match(text, pos)
            if match is None:
                raise ValueError(f"invalid JSON path {text!r} at position {pos}")
            key, index = match.groups()
            segments.append(int(index) if index is not None else key)
            pos = match.end()
        return cls(tuple(segments))

    def __str__(self) -> str:
        out = ""
        for segment in self.segments:
            if isinstance(segment, int):
                out += f"[{segment}]"
            else:
                out += f".{segment}" if out else segment
        return out


Selector = CssSelector | TableIndex | JsonPath
