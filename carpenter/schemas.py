"""Serialisable payloads for built tables (used by the JSON API and CLI)."""

from typing import Any, Optional

from pydantic import BaseModel, Field

from carpenter.pagination.schemas import PaginationMeta


class ColumnSummary(BaseModel):
    key: str
    label: str
    sortable: bool = True
    direction: Optional[str] = Field(
        default=None,
        description="'asc' or 'desc' when the table is currently sorted by this column",
    )


class ActionLink(BaseModel):
    key: str
    label: str
    href: str


class RowPayload(BaseModel):
    id: Any = None
    cells: dict[str, Any] = Field(default_factory=dict)
    actions: list[ActionLink] = Field(default_factory=list)


class TableResponse(BaseModel):
    """A built table: visible columns, presented rows and paging state."""

    name: str
    title: str
    columns: list[ColumnSummary]
    rows: list[RowPayload]
    actions: list[ActionLink] = Field(default_factory=list)
    pagination: PaginationMeta
    sort: Optional[str] = None
    direction: Optional[str] = None
    filters: dict[str, Any] = Field(default_factory=dict)


class TableSummary(BaseModel):
    name: str
    url: str
