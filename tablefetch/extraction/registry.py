"""Extractor registry mapping selector types to extractor callables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from .errors import SelectorMatchError
from .html import extract_elements, extract_table
from .jsonpath import extract_path
from .models import HtmlDocument, JsonDocument, ParsedDocument
from .selectors import CssSelector, JsonPath, Selector, TableIndex

Extractor = Callable[[Any, Any], Any]


@dataclass
class ExtractorRegistration:
    """An extractor for one selector type on one document variant."""

    selector_type: type
    document_type: type
    extractor: Extractor


class ExtractorRegistry:
    """Registry dispatching ``(document, selector)`` pairs to extractors."""

    def __init__(self) -> None:
        self._registrations: dict[type, ExtractorRegistration] = {}

    def register(self, selector_type: type, document_type: type, extractor: Extractor) -> None:
        """Register *extractor* for *selector_type*, replacing any previous one."""
        self._registrations[selector_type] = ExtractorRegistration(
            selector_type=selector_type,
            document_type=document_type,
            extractor=extractor,
        )

    def get_extractor(self, selector: Selector) -> ExtractorRegistration | None:
        return self._registrations.get(type(selector))

    def extract(self, doc: ParsedDocument, selector: Selector) -> Any:
        reg = self.get_extractor(selector)
        if reg is None:
            raise SelectorMatchError(f"no extractor registered for {type(selector).__name__}")
        if not isinstance(doc, reg.document_type):
            raise SelectorMatchError(
                f"{type(selector).__name__} cannot be applied to a {doc.format.value} document"
            )
        return reg.extractor(doc, selector)


def build_default_registry() -> ExtractorRegistry:
    """Registry covering CSS selectors, table ordinals and JSON paths."""
    registry = ExtractorRegistry()
    registry.register(CssSelector, HtmlDocument, extract_elements)
    registry.register(TableIndex, HtmlDocument, lambda doc, sel: extract_table(doc, sel.index, header=sel.header))
    registry.register(JsonPath, JsonDocument, extract_path)
    return registry


_default_registry = build_default_registry()


def extract(doc: ParsedDocument, selector: Selector) -> Any:
    """Apply *selector* to *doc* via the default registry."""
    return _default_registry.extract(doc, selector)
