"""Paginator driver implementations.

- DefaultPaginator: numbered links in a window around the current page
- SimplePaginator: previous/next links only
"""

import math
from typing import Any, Optional, Protocol, runtime_checkable
from urllib.parse import urlencode

from carpenter.config import PaginatorConfig
from carpenter.pagination.schemas import PageLink, PaginationMeta


@runtime_checkable
class PaginatorDriver(Protocol):
    """Protocol for paginator implementations."""

    def paginate(
        self,
        total: int,
        per_page: int,
        page: Any = 1,
        base_url: str = "",
        query: Optional[dict[str, Any]] = None,
    ) -> PaginationMeta: ...


def coerce_page(page: Any) -> int:
    """Session and query-string values arrive as strings or garbage."""
    try:
        return int(page)
    except (TypeError, ValueError):
        return 1


class DefaultPaginator:
    """Paginator producing a window of numbered page links."""

    def __init__(self, config: Optional[PaginatorConfig] = None):
        self.config = config or PaginatorConfig()

    def url(self, base_url: str, query: Optional[dict[str, Any]], page: int) -> str:
        params = {k: v for k, v in (query or {}).items() if v is not None}
        params[self.config.page_param] = page
        return f"{base_url}?{urlencode(params)}"

    def paginate(
        self,
        total: int,
        per_page: int,
        page: Any = 1,
        base_url: str = "",
        query: Optional[dict[str, Any]] = None,
    ) -> PaginationMeta:
        """Compute pagination metadata.

        Args:
            total: Number of records after filtering
            per_page: Page size (must be positive)
            page: Requested page; clamped to [1, last_page]
            base_url: Path the page links point at
            query: Extra query parameters carried on every link (sort, filters)

        Returns:
            PaginationMeta for the clamped page
        """
        if per_page <= 0:
            raise ValueError(f"per_page must be positive, got {per_page}")

        last_page = max(1, math.ceil(total / per_page))
        current = min(max(coerce_page(page), 1), last_page)
        offset = (current - 1) * per_page

        return PaginationMeta(
            page=current,
            per_page=per_page,
            total=total,
            last_page=last_page,
            offset=offset,
            from_item=offset + 1 if total else 0,
            to_item=min(offset + per_page, total),
            previous_url=self.url(base_url, query, current - 1) if current > 1 else None,
            next_url=self.url(base_url, query, current + 1) if current < last_page else None,
            links=self.links(current, last_page, base_url, query),
        )

    def links(
        self,
        current: int,
        last_page: int,
        base_url: str,
        query: Optional[dict[str, Any]],
    ) -> list[PageLink]:
        if last_page <= 1:
            return []
        window = self.config.window
        start = max(1, current - window)
        end = min(last_page, current + window)
        return [
            PageLink(page=p, url=self.url(base_url, query, p), active=p == current)
            for p in range(start, end + 1)
        ]


class SimplePaginator(DefaultPaginator):
    """Paginator with previous/next links only."""

    def links(
        self,
        current: int,
        last_page: int,
        base_url: str,
        query: Optional[dict[str, Any]],
    ) -> list[PageLink]:
        return []
