"""Request/response Pydantic models."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class FieldRequest(BaseModel):
    selector: str
    attr: str | None = None
    normalize: bool = True


class ExtractRequest(BaseModel):
    url: str
    format: Literal["html", "csv", "json"] | None = None
    query: dict[str, str] = {}
    header: bool | None = None
    delimiter: str | None = None
    table_index: int | None = None
    fields: dict[str, FieldRequest] = {}
    path: str | list[str | int] | None = None
    drop_rows: list[int] = []
    infer_types: bool = True
    paged: bool = False
    page_size: int | None = Field(default=None, gt=0)
    max_pages: int | None = Field(default=None, gt=0)


class TableResponse(BaseModel):
    columns: list[str]
    rows: list[list[Any]]
    num_rows: int
