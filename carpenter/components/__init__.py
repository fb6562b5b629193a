"""Table building blocks: columns, rows, cells, actions."""

from carpenter.components.action import Action
from carpenter.components.cell import NO_COLUMN, Cell
from carpenter.components.column import Column, Presenter, SpreadsheetCellCallback
from carpenter.components.row import Row
from carpenter.components.spreadsheet_cell import SpreadsheetCell

__all__ = [
    "Action",
    "Cell",
    "Column",
    "NO_COLUMN",
    "Presenter",
    "Row",
    "SpreadsheetCell",
    "SpreadsheetCellCallback",
]
