"""A single table cell.

The cell keeps weak references to its row and column: the table owns both,
the cell only needs them as rendering context. Once the table (and with it
the column) is gone, spreadsheet rendering reports NO_COLUMN.
"""

import weakref
from typing import TYPE_CHECKING, Any, Optional

from carpenter.components.spreadsheet_cell import SpreadsheetCell

if TYPE_CHECKING:
    from carpenter.components.column import Column
    from carpenter.components.row import Row


class _NoColumn:
    """Result of spreadsheet rendering for a cell without a column."""

    _instance: Optional["_NoColumn"] = None

    def __new__(cls) -> "_NoColumn":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_COLUMN"


NO_COLUMN = _NoColumn()


class Cell:
    """Holds the presented value of one field of one row."""

    def __init__(self, value: Any, row: Optional["Row"], column: Optional["Column"]):
        self._row = weakref.ref(row) if row is not None else None
        self._column = weakref.ref(column) if column is not None else None

        self._create_cell(value, row, column)

    def _create_cell(self, value: Any, row: Optional["Row"], column: Optional["Column"]) -> None:
        """Run the column presenter on the cell value."""
        if column is not None and column.has_presenter:
            value = column.presenter(value, row)

        self.value = value

    @property
    def row(self) -> Optional["Row"]:
        return self._row() if self._row is not None else None

    @property
    def column(self) -> Optional["Column"]:
        return self._column() if self._column is not None else None

    def render_spreadsheet_cell(self) -> Any:
        """Render this cell for a spreadsheet export.

        Returns:
            NO_COLUMN when the cell has no (live) column, the rendered
            SpreadsheetCell string when the column defines a spreadsheet
            callback, otherwise the cell value unchanged.
        """
        column = self.column
        if column is None:
            return NO_COLUMN

        if not column.has_spreadsheet_cell:
            return self.value

        row = self.row
        cell = SpreadsheetCell(self.value, row.id if row is not None else None)
        column.spreadsheet_cell(cell)

        return cell.render()

    def __str__(self) -> str:
        return "" if self.value is None else str(self.value)

    def __repr__(self) -> str:
        return f"Cell({self.value!r})"
