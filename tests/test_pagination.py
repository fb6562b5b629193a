"""Tests for the paginator drivers."""

import pytest

from carpenter.config import PaginatorConfig
from carpenter.pagination import DefaultPaginator, PaginationMeta, SimplePaginator


class TestDefaultPaginator:
    def test_metadata(self) -> None:
        meta = DefaultPaginator().paginate(total=45, per_page=10, page=3, base_url="/users")

        assert meta.page == 3
        assert meta.last_page == 5
        assert meta.offset == 20
        assert (meta.from_item, meta.to_item) == (21, 30)
        assert meta.previous_url == "/users?page=2"
        assert meta.next_url == "/users?page=4"

    def test_link_window(self) -> None:
        paginator = DefaultPaginator(PaginatorConfig(window=1))
        meta = paginator.paginate(total=100, per_page=10, page=5)

        assert [link.page for link in meta.links] == [4, 5, 6]
        assert [link.active for link in meta.links] == [False, True, False]

    def test_query_parameters_carried_on_links(self) -> None:
        meta = DefaultPaginator().paginate(
            total=30, per_page=10, page=1, base_url="/t", query={"sort": "name", "dir": "asc"}
        )

        assert meta.next_url == "/t?sort=name&dir=asc&page=2"

    @pytest.mark.parametrize("page, expected", [(0, 1), (-4, 1), (9, 3), ("2", 2), ("junk", 1), (None, 1)])
    def test_page_clamping(self, page, expected: int) -> None:
        meta = DefaultPaginator().paginate(total=25, per_page=10, page=page)

        assert meta.page == expected

    def test_empty_result_set(self) -> None:
        meta = DefaultPaginator().paginate(total=0, per_page=10, page=4)

        assert meta.page == 1
        assert meta.last_page == 1
        assert (meta.from_item, meta.to_item) == (0, 0)
        assert meta.links == []
        assert meta.has_pages is False

    def test_rejects_non_positive_page_size(self) -> None:
        with pytest.raises(ValueError):
            DefaultPaginator().paginate(total=10, per_page=0)

    def test_custom_page_param(self) -> None:
        paginator = DefaultPaginator(PaginatorConfig(page_param="p"))

        assert paginator.paginate(total=20, per_page=10).next_url == "?p=2"


class TestSimplePaginator:
    def test_previous_next_only(self) -> None:
        meta = SimplePaginator().paginate(total=50, per_page=10, page=2)

        assert meta.links == []
        assert meta.previous_url == "?page=1"
        assert meta.next_url == "?page=3"


def test_single_page_meta() -> None:
    meta = PaginationMeta.single_page(7)

    assert (meta.page, meta.last_page, meta.from_item, meta.to_item) == (1, 1, 1, 7)


def test_has_pages_is_serialised() -> None:
    meta = DefaultPaginator().paginate(total=30, per_page=10)

    assert meta.model_dump()["has_pages"] is True
    assert PaginationMeta.single_page(3).model_dump()["has_pages"] is False
