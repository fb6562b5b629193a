"""A table row: one record wrapped as an ordered set of cells."""

from typing import Any, Iterable, Iterator

from carpenter.components.cell import Cell
from carpenter.components.column import Column
from carpenter.support.records import get_field


class Row:
    """Ordered column key -> Cell mapping for one record.

    Cells are created in column declaration order when the row is built.
    Presenters receive the row itself, so they can read sibling fields with
    ``row.get("field")`` or the identifier with ``row.id``.
    """

    def __init__(self, record: Any, columns: Iterable[Column], id_key: str = "id"):
        self.record = record
        self.id = get_field(record, id_key)
        self.cells: dict[str, Cell] = {}

        for column in columns:
            self.cells[column.key] = Cell(get_field(record, column.key), self, column)

    def get(self, key: str, default: Any = None) -> Any:
        """Raw (unpresented) field value from the underlying record."""
        return get_field(self.record, key, default)

    def values(self) -> dict[str, Any]:
        """Presented values keyed by column."""
        return {key: cell.value for key, cell in self.cells.items()}

    def __getitem__(self, key: str) -> Cell:
        return self.cells[key]

    def __contains__(self, key: object) -> bool:
        return key in self.cells

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells.values())

    def __len__(self) -> int:
        return len(self.cells)

    def __repr__(self) -> str:
        return f"Row(id={self.id!r})"
