"""Tests for Row, Column and Action."""

from datetime import date
from types import SimpleNamespace

import pytest

from carpenter.components import Action, Column, Row
from carpenter.exceptions import TableAlreadyBuilt
from carpenter.support.records import default_label, get_field, sort_key


class TestRow:
    def test_cells_follow_column_order(self) -> None:
        columns = [Column("email"), Column("name"), Column("id")]
        row = Row({"id": 1, "name": "Alice", "email": "a@example.com"}, columns)

        assert list(row.cells) == ["email", "name", "id"]
        assert [cell.value for cell in row] == ["a@example.com", "Alice", 1]

    def test_id_from_custom_key(self) -> None:
        row = Row({"uuid": "abc", "name": "x"}, [], id_key="uuid")
        assert row.id == "abc"

    def test_reads_object_records(self) -> None:
        record = SimpleNamespace(id=9, name="Obj")
        columns = [Column("name")]
        row = Row(record, columns)

        assert row.id == 9
        assert row["name"].value == "Obj"

    def test_dotted_keys_reach_nested_values(self) -> None:
        columns = [Column("team.name")]
        row = Row({"id": 1, "team": {"name": "Core"}}, columns)

        assert row["team.name"].value == "Core"

    def test_missing_fields_are_none(self) -> None:
        columns = [Column("missing"), Column("team.name")]
        row = Row({"id": 1, "team": None}, columns)

        assert row.values() == {"missing": None, "team.name": None}

    def test_presenter_can_read_sibling_fields(self) -> None:
        columns = [
            Column("name").set_presenter(lambda value, r: f"{value} <{r.get('email')}>")
        ]
        row = Row({"id": 1, "name": "Alice", "email": "a@example.com"}, columns)

        assert row["name"].value == "Alice <a@example.com>"

    def test_cells_point_back_to_row_and_column(self) -> None:
        column = Column("name")
        row = Row({"id": 1, "name": "Alice"}, [column])

        assert row["name"].row is row
        assert row["name"].column is column
        assert "name" in row
        assert len(row) == 1


class TestColumn:
    def test_defaults(self) -> None:
        column = Column("created_at")

        assert column.label == "Created At"
        assert column.visible is True
        assert column.sortable is True
        assert column.has_presenter is False
        assert column.has_spreadsheet_cell is False

    def test_fluent_setters(self) -> None:
        column = Column("name").set_label("Full name").unsortable().hide()

        assert column.label == "Full name"
        assert column.sortable is False
        assert column.visible is False

    def test_frozen_column_rejects_changes(self) -> None:
        column = Column("name", table_name="users")
        column.freeze()

        with pytest.raises(TableAlreadyBuilt, match="users"):
            column.set_label("Other")


class TestAction:
    def test_row_href_template(self) -> None:
        action = Action("edit", "row").set_href("/users/{id}/edit?email={email}")
        row = Row({"id": 3, "email": "c@example.org"}, [])

        assert action.href_for(row) == "/users/3/edit?email=c@example.org"

    def test_callable_href(self) -> None:
        action = Action("view", "row").set_href(lambda r: f"/view/{r.id}")
        row = Row({"id": 8}, [])

        assert action.href_for(row) == "/view/8"

    def test_table_action_without_href(self) -> None:
        action = Action("create")

        assert action.label == "Create"
        assert action.href_for() == "#"

    def test_unknown_position_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown action position"):
            Action("edit", "footer")


class TestRecordHelpers:
    def test_literal_dotted_key_wins(self) -> None:
        assert get_field({"a.b": 1, "a": {"b": 2}}, "a.b") == 1

    def test_default_label(self) -> None:
        assert default_label("team.name") == "Team Name"

    def test_sort_key_orders_mixed_types(self) -> None:
        values = ["b", 3, None, date(2024, 1, 1), 1.5, {"x": 1}, "a"]

        assert sorted(values, key=sort_key) == [None, 1.5, 3, "a", "b", date(2024, 1, 1), {"x": 1}]
