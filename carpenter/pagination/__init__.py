"""Pagination - page boundaries and links for a table.

Built-in drivers: ``default`` (numbered window) and ``simple`` (prev/next).
"""

from carpenter.pagination.backends import DefaultPaginator, PaginatorDriver, SimplePaginator
from carpenter.pagination.manager import PaginationManager
from carpenter.pagination.schemas import PageLink, PaginationMeta

__all__ = [
    "DefaultPaginator",
    "PageLink",
    "PaginationManager",
    "PaginationMeta",
    "PaginatorDriver",
    "SimplePaginator",
]
