"""POST /extract and POST /extract/batch endpoint handlers."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from tablefetch.api.schemas import ExtractRequest, TableResponse
from tablefetch.api.service import run_batch, run_extraction, to_recipe
from tablefetch.config import Settings
from tablefetch.extraction import (
    ColumnLengthMismatchError,
    ExtractionError,
    ExtractionRecipe,
    Fetcher,
    MalformedInputError,
    NetworkError,
    PathNotFoundError,
    SelectorMatchError,
)

router = APIRouter()

_STATUS_BY_ERROR: dict[type[ExtractionError], int] = {
    NetworkError: 502,
    MalformedInputError: 422,
    PathNotFoundError: 422,
    ColumnLengthMismatchError: 422,
    SelectorMatchError: 404,
}


def _get_fetcher(request: Request) -> Fetcher:
    return request.app.state.fetcher


def _get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _recipe_or_422(body: ExtractRequest, settings: Settings) -> ExtractionRecipe:
    try:
        return to_recipe(body, settings)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _to_http_error(exc: ExtractionError) -> HTTPException:
    return HTTPException(status_code=_STATUS_BY_ERROR.get(type(exc), 500), detail=str(exc))


@router.post("/extract", response_model=TableResponse)
async def create_extraction(
    body: ExtractRequest,
    fetcher: Fetcher = Depends(_get_fetcher),
    settings: Settings = Depends(_get_settings),
):
    recipe = _recipe_or_422(body, settings)
    try:
        return await run_extraction(fetcher, settings, body, recipe)
    except ExtractionError as exc:
        raise _to_http_error(exc) from exc


@router.post("/extract/batch", response_model=list[TableResponse])
async def create_batch_extraction(
    bodies: list[ExtractRequest],
    fetcher: Fetcher = Depends(_get_fetcher),
    settings: Settings = Depends(_get_settings),
):
    recipes = [_recipe_or_422(body, settings) for body in bodies]
    try:
        return await run_batch(fetcher, settings, recipes)
    except ExtractionError as exc:
        raise _to_http_error(exc) from exc
