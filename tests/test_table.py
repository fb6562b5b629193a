"""Tests for Table declaration, materialisation and output."""

import gc

import pytest

from carpenter import NO_COLUMN, Carpenter, CarpenterError, Table, TableAlreadyBuilt


def build(carpenter: Carpenter, users: list[dict], **state) -> Table:
    """Build a users table with the given session state applied."""

    def builder(table: Table) -> None:
        table.data(users)
        table.column("name")
        table.column("email")
        table.column("age")
        table.column("team.name").set_label("Team").unsortable()

    return carpenter.make("users", lambda t: (builder(t), t.update_state(**state) if state else None))


class TestDeclaration:
    def test_columns_keep_declaration_order(self, carpenter: Carpenter, users) -> None:
        table = build(carpenter, users)

        assert [c.key for c in table.columns] == ["name", "email", "age", "team.name"]

    def test_column_is_get_or_create(self, carpenter: Carpenter, users) -> None:
        table = build(carpenter, users)

        assert table.column("name") is table.column("name")

    def test_rows_are_lazy(self, carpenter: Carpenter, users) -> None:
        table = build(carpenter, users)

        assert table.is_built is False
        assert len(table.rows) == 5
        assert table.is_built is True

    def test_structure_frozen_after_build(self, carpenter: Carpenter, users) -> None:
        table = build(carpenter, users)
        table.build()

        with pytest.raises(TableAlreadyBuilt):
            table.column("new")
        with pytest.raises(TableAlreadyBuilt):
            table.column("name").set_label("Changed")
        with pytest.raises(TableAlreadyBuilt):
            table.paginate(2)

    def test_missing_source_fails(self, carpenter: Carpenter) -> None:
        table = carpenter.make("empty", lambda t: t.column("name"))

        with pytest.raises(CarpenterError, match="no data source"):
            table.rows

    def test_failed_build_leaves_table_unbuilt(self, carpenter: Carpenter, users) -> None:
        def builder(table: Table) -> None:
            table.data(users)
            table.column("age").set_presenter(lambda value, row: 100 // value)

        table = carpenter.make("users", builder)

        with pytest.raises(TypeError):
            table.build()
        assert table.is_built is False

    def test_invalid_per_page(self, carpenter: Carpenter, users) -> None:
        table = carpenter.make("users", lambda t: t.data(users))

        with pytest.raises(ValueError):
            table.paginate(0)


class TestSortingAndFiltering:
    def test_sort_from_session(self, carpenter: Carpenter, users) -> None:
        table = build(carpenter, users, sort="age", direction="desc")

        assert [row.id for row in table.rows] == [3, 1, 2, 5, 4]
        assert table.sort_state == ("age", "desc")

    def test_sort_ascending_puts_none_first(self, carpenter: Carpenter, users) -> None:
        table = build(carpenter, users, sort="age", direction="asc")

        assert [row.id for row in table.rows] == [4, 5, 2, 1, 3]

    def test_sort_toggles_without_direction(self, carpenter: Carpenter, users) -> None:
        def builder(table: Table) -> None:
            table.data(users).column("name")
            table.update_state(sort="name")
            table.update_state(sort="name")

        table = carpenter.make("users", builder)

        assert table.sort_state == ("name", "desc")

    def test_unsortable_column_is_ignored(self, carpenter: Carpenter, users) -> None:
        table = build(carpenter, users, sort="team.name", direction="asc")

        assert table.sort_state == (None, None)
        assert [row.id for row in table.rows] == [1, 2, 3, 4, 5]

    def test_default_sort(self, carpenter: Carpenter, users) -> None:
        def builder(table: Table) -> None:
            table.data(users).column("name")
            table.default_sort("name", "desc")

        table = carpenter.make("users", builder)

        assert [row["name"].value for row in table.rows] == ["Erin", "Dave", "Carol", "Bob", "Alice"]

    @pytest.mark.parametrize("direction, expected", [("asc", [3, 4, 1, 2]), ("desc", [2, 1, 4, 3])])
    def test_mixed_type_column_sorts(self, carpenter: Carpenter, direction: str, expected: list) -> None:
        scores = [
            {"id": 1, "score": 10},
            {"id": 2, "score": "N/A"},
            {"id": 3, "score": None},
            {"id": 4, "score": 2.5},
        ]

        def builder(table: Table) -> None:
            table.data(scores).column("score")
            table.update_state(sort="score", direction=direction)

        table = carpenter.make("scores", builder)

        assert [row.id for row in table.rows] == expected

    def test_state_is_captured_at_build(self, carpenter: Carpenter, users) -> None:
        table = build(carpenter, users, sort="name", direction="asc", filters={"email": "example"})
        table.build()

        table.session.put("carpenter.users.dir", "desc")
        table.session.put("carpenter.users.filters", {})

        assert table.sort_state == ("name", "asc")
        assert table.active_filters == {"email": "example"}
        assert table.to_dict().direction == "asc"
        assert "dir=desc" in table.sort_url(table.column("name"))

    def test_invalid_direction_rejected(self, carpenter: Carpenter, users) -> None:
        with pytest.raises(ValueError, match="Sort direction"):
            build(carpenter, users, sort="name", direction="sideways")

    def test_string_filter_is_case_insensitive_substring(self, carpenter: Carpenter, users) -> None:
        table = build(carpenter, users, filters={"email": "EXAMPLE.ORG"})

        assert [row.id for row in table.rows] == [3, 4]
        assert table.total == 2

    def test_nested_filter(self, carpenter: Carpenter, users) -> None:
        table = build(carpenter, users, filters={"team.name": "core"})

        assert [row.id for row in table.rows] == [1, 3]

    def test_filter_on_undeclared_column_ignored(self, carpenter: Carpenter, users) -> None:
        table = build(carpenter, users, filters={"password": "x", "name": ""})

        assert table.active_filters == {}
        assert table.total == 5


class TestPagination:
    def test_paginated_slice(self, carpenter: Carpenter, users) -> None:
        def builder(table: Table) -> None:
            table.data(users).column("name")
            table.paginate(2)
            table.update_state(page=2)

        table = carpenter.make("users", builder)

        assert [row.id for row in table.rows] == [3, 4]
        assert table.pagination.page == 2
        assert table.pagination.last_page == 3
        assert table.pagination.from_item == 3
        assert table.pagination.to_item == 4

    def test_page_clamped_to_last(self, carpenter: Carpenter, users) -> None:
        def builder(table: Table) -> None:
            table.data(users).column("name")
            table.paginate(2)
            table.update_state(page=99)

        table = carpenter.make("users", builder)

        assert table.pagination.page == 3
        assert [row.id for row in table.rows] == [5]

    @pytest.mark.parametrize("page", ["abc", None, "2"])
    def test_page_value_is_coerced(self, carpenter: Carpenter, users, page) -> None:
        def builder(table: Table) -> None:
            table.data(users).column("name")
            table.paginate(2)
            table.update_state(page=page)

        table = carpenter.make("users", builder)

        assert table.pagination.page == (2 if page == "2" else 1)

    def test_sort_change_resets_page(self, carpenter: Carpenter, users) -> None:
        def builder(table: Table) -> None:
            table.data(users).column("name")
            table.paginate(2)
            table.update_state(page=3)
            table.update_state(sort="name", direction="asc")

        table = carpenter.make("users", builder)

        assert table.pagination.page == 1

    def test_configured_per_page(self, users) -> None:
        carpenter = Carpenter({"paginator": {"per_page": 4}})
        table = carpenter.make("users", lambda t: t.data(users).column("name"))

        assert len(table.rows) == 4
        assert table.pagination.has_pages is True

    def test_unpaginated_table_has_single_page(self, carpenter: Carpenter, users) -> None:
        table = build(carpenter, users)

        assert table.pagination.has_pages is False
        assert table.pagination.total == 5
        assert table.pagination.to_item == 5


class TestOutput:
    def test_render_html(self, carpenter: Carpenter, users) -> None:
        def builder(table: Table) -> None:
            table.data(users)
            table.set_title("Team members")
            table.set_base_url("/users")
            table.column("name").set_presenter(lambda value, row: f"<b>{value}</b>")
            table.column("email").hide()
            table.action("create").set_href("/users/new")
            table.action("edit", "row").set_href("/users/{id}/edit")
            table.paginate(2)

        html = carpenter.make("users", builder).render()

        assert "Team members" in html
        assert "&lt;b&gt;Alice&lt;/b&gt;" in html
        assert "alice@example.com" not in html
        assert 'href="/users/new"' in html
        assert 'href="/users/1/edit"' in html
        assert "/users?sort=name&amp;dir=asc" in html
        assert "page=2" in html
        assert "Showing 1 to 2 of 5" in html

    def test_render_marks_sorted_column(self, carpenter: Carpenter, users) -> None:
        table = build(carpenter, users, sort="name", direction="asc")
        html = table.render()

        assert "sorted-asc" in html
        assert "?sort=name&amp;dir=desc" in html

    def test_render_empty_table(self, carpenter: Carpenter) -> None:
        table = carpenter.make("empty", lambda t: t.data([]).column("name"))

        assert "No results found." in table.render()

    def test_csv_uses_spreadsheet_rendering(self, carpenter: Carpenter, users) -> None:
        def builder(table: Table) -> None:
            table.data(users[:2])
            table.column("name")
            table.column("age").set_label("Age (years)").set_spreadsheet_cell(
                lambda cell: cell.set_number_format(".1f")
            )

        csv_text = carpenter.make("users", builder).to_csv()

        assert csv_text.splitlines() == ["Name,Age (years)", "Alice,34.0", "Bob,27.0"]

    def test_rows_need_the_table_for_spreadsheet_rendering(self, carpenter: Carpenter, users) -> None:
        def builder(table: Table) -> None:
            table.data(users[:1])
            table.column("age").set_spreadsheet_cell(lambda cell: cell.set_number_format("d"))

        table = carpenter.make("users", builder)
        rows = table.rows
        assert rows[0]["age"].render_spreadsheet_cell() == "34"

        del table
        gc.collect()

        assert rows[0]["age"].render_spreadsheet_cell() is NO_COLUMN
        assert rows[0]["age"].value == 34

    def test_to_dict(self, carpenter: Carpenter, users) -> None:
        def builder(table: Table) -> None:
            table.data(users)
            table.column("name").set_presenter(lambda value, row: value.upper())
            table.action("delete", "row").set_href("/users/{id}")
            table.update_state(sort="name", direction="asc", filters={"name": "a"})

        payload = carpenter.make("users", builder).to_dict()

        assert payload.sort == "name"
        assert payload.filters == {"name": "a"}
        assert [r.cells["name"] for r in payload.rows] == ["ALICE", "CAROL", "DAVE"]
        assert payload.rows[0].actions[0].href == "/users/1"
        assert payload.columns[0].direction == "asc"

    def test_unknown_view_driver(self, carpenter: Carpenter, users) -> None:
        from carpenter import DriverNotFoundError

        table = build(carpenter, users)

        with pytest.raises(DriverNotFoundError, match="xlsx"):
            table.render(driver="xlsx")
