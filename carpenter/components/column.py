"""Table column definitions."""

from typing import TYPE_CHECKING, Any, Optional, Protocol

from carpenter.components.spreadsheet_cell import SpreadsheetCell
from carpenter.exceptions import TableAlreadyBuilt
from carpenter.support.records import default_label

if TYPE_CHECKING:
    from carpenter.components.row import Row


class Presenter(Protocol):
    """Transforms a raw value into its display value."""

    def __call__(self, value: Any, row: "Row") -> Any: ...


class SpreadsheetCellCallback(Protocol):
    """Configures a SpreadsheetCell in place before it is rendered."""

    def __call__(self, cell: SpreadsheetCell) -> None: ...


class Column:
    """A single column: field key, label, flags and value hooks.

    Setters return the column so definitions can be chained:

        table.column("price").set_label("Price").set_presenter(format_money)

    Once the owning table has built its rows the column is frozen and every
    setter raises TableAlreadyBuilt.
    """

    def __init__(self, key: str, table_name: Optional[str] = None):
        self.key = key
        self.table_name = table_name
        self.label = default_label(key)
        self.visible = True
        self.sortable = True
        self.presenter: Optional[Presenter] = None
        self.spreadsheet_cell: Optional[SpreadsheetCellCallback] = None
        self._frozen = False

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise TableAlreadyBuilt(self.table_name or self.key)

    def freeze(self) -> None:
        self._frozen = True

    def set_label(self, label: str) -> "Column":
        self._ensure_mutable()
        self.label = label
        return self

    def set_presenter(self, presenter: Presenter) -> "Column":
        self._ensure_mutable()
        self.presenter = presenter
        return self

    def set_spreadsheet_cell(self, callback: SpreadsheetCellCallback) -> "Column":
        self._ensure_mutable()
        self.spreadsheet_cell = callback
        return self

    def set_sortable(self, sortable: bool = True) -> "Column":
        self._ensure_mutable()
        self.sortable = sortable
        return self

    def unsortable(self) -> "Column":
        return self.set_sortable(False)

    def hide(self) -> "Column":
        self._ensure_mutable()
        self.visible = False
        return self

    def show(self) -> "Column":
        self._ensure_mutable()
        self.visible = True
        return self

    @property
    def has_presenter(self) -> bool:
        return self.presenter is not None

    @property
    def has_spreadsheet_cell(self) -> bool:
        return self.spreadsheet_cell is not None

    def __repr__(self) -> str:
        return f"Column({self.key!r})"
