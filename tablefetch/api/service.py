"""Service layer: turns API requests into pipeline runs."""

from __future__ import annotations

import asyncio
import logging

from tablefetch.api.schemas import ExtractRequest, TableResponse
from tablefetch.config import Settings
from tablefetch.extraction import (
    DocumentFormat,
    ExtractionRecipe,
    Fetcher,
    FieldSpec,
    JsonPath,
    ResultTable,
    arun,
    arun_many,
    run_paged,
)

logger = logging.getLogger(__name__)


def to_recipe(body: ExtractRequest, settings: Settings) -> ExtractionRecipe:
    """Build an :class:`ExtractionRecipe` from a request body.

    A string ``path`` is parsed as a dotted path and raises ``ValueError``
    if it is malformed; a list is used segment by segment.
    """
    if isinstance(body.path, str):
        path: JsonPath | None = JsonPath.parse(body.path)
    elif body.path is not None:
        path = JsonPath(tuple(body.path))
    else:
        path = None

    return ExtractionRecipe(
        url=body.url,
        format=DocumentFormat(body.format) if body.format else None,
        query=dict(body.query),
        header=body.header,
        delimiter=body.delimiter or settings.csv_delimiter,
        table_index=body.table_index,
        fields={
            name: FieldSpec(selector=f.selector, attr=f.attr, normalize=f.normalize)
            for name, f in body.fields.items()
        },
        path=path,
        drop_rows=tuple(body.drop_rows),
        infer_types=body.infer_types,
    )


def to_response(table: ResultTable) -> TableResponse:
    return TableResponse(
        columns=table.names,
        rows=[list(row) for row in table.rows()],
        num_rows=table.num_rows,
    )


async def run_extraction(
    fetcher: Fetcher,
    settings: Settings,
    body: ExtractRequest,
    recipe: ExtractionRecipe,
) -> TableResponse:
    """Run the pipeline for one request, paging when ``body.paged`` is set."""
    logger.info(
        "extraction requested",
        extra={"url": body.url, "format": body.format, "paged": body.paged},
    )
    if body.paged:
        # paging is sequential and blocking; keep it off the event loop
        table = await asyncio.to_thread(
            run_paged,
            recipe,
            fetcher,
            page_size=body.page_size or settings.page_size,
            max_pages=body.max_pages,
        )
    else:
        table = await arun(recipe, fetcher)
    return to_response(table)


async def run_batch(
    fetcher: Fetcher,
    settings: Settings,
    recipes: list[ExtractionRecipe],
) -> list[TableResponse]:
    """Fetch every recipe concurrently and return one table per recipe, in order."""
    logger.info(
        "batch extraction requested",
        extra={"recipe_count": len(recipes), "max_concurrency": settings.max_concurrency},
    )
    tables = await arun_many(recipes, fetcher, max_concurrency=settings.max_concurrency)
    return [to_response(t) for t in tables]
