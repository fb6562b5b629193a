"""Pagination metadata handed from the paginator to the view."""

from typing import Optional

from pydantic import BaseModel, Field, computed_field


class PageLink(BaseModel):
    """One numbered page link."""

    page: int
    url: str
    active: bool = False


class PaginationMeta(BaseModel):
    """Where the current page sits within the full result set."""

    page: int = Field(default=1, description="Current page (1-based, clamped)")
    per_page: int = Field(default=0, description="Page size; 0 when the table is not paginated")
    total: int = Field(default=0, description="Records matching the active filters")
    last_page: int = Field(default=1)
    offset: int = Field(default=0, description="Index of the first record on this page")
    from_item: int = Field(default=0, description="1-based number of the first record shown")
    to_item: int = Field(default=0, description="1-based number of the last record shown")
    previous_url: Optional[str] = None
    next_url: Optional[str] = None
    links: list[PageLink] = Field(default_factory=list)

    @computed_field
    @property
    def has_pages(self) -> bool:
        return self.last_page > 1

    @classmethod
    def single_page(cls, total: int) -> "PaginationMeta":
        """Metadata for a table that shows every record at once."""
        return cls(
            page=1,
            per_page=0,
            total=total,
            last_page=1,
            offset=0,
            from_item=1 if total else 0,
            to_item=total,
        )
