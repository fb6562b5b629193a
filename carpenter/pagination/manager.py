"""Paginator driver manager."""

from carpenter.pagination.backends import DefaultPaginator, SimplePaginator
from carpenter.support.manager import Manager


class PaginationManager(Manager):
    kind = "paginator"

    def create_default_driver(self) -> DefaultPaginator:
        return DefaultPaginator(self.config)

    def create_simple_driver(self) -> SimplePaginator:
        return SimplePaginator(self.config)
