"""Table and row actions (links such as "Create", "Edit", "Delete")."""

from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from carpenter.support.records import default_label

if TYPE_CHECKING:
    from carpenter.components.row import Row

POSITIONS = ("table", "row")

Href = Union[str, Callable[[Optional["Row"]], str]]


class _RowFields(dict):
    """format_map() source that reads missing placeholders from the row."""

    def __init__(self, row: "Row"):
        super().__init__(id=row.id)
        self._row = row

    def __missing__(self, key: str) -> Any:
        value = self._row.get(key)
        return "" if value is None else value


class Action:
    """A link shown above the table or beside each row.

    Row action hrefs may contain ``{id}`` and record-field placeholders
    (``/users/{id}/edit``), or be a callable receiving the Row.
    """

    def __init__(self, key: str, position: str = "table"):
        if position not in POSITIONS:
            raise ValueError(f"Unknown action position: '{position}'. Expected one of {POSITIONS}")
        self.key = key
        self.position = position
        self.label = default_label(key)
        self.href: Optional[Href] = None
        self.css_class = ""
        self.confirm: Optional[str] = None

    def set_label(self, label: str) -> "Action":
        self.label = label
        return self

    def set_href(self, href: Href) -> "Action":
        self.href = href
        return self

    def set_class(self, css_class: str) -> "Action":
        self.css_class = css_class
        return self

    def set_confirm(self, message: str) -> "Action":
        self.confirm = message
        return self

    def href_for(self, row: Optional["Row"] = None) -> str:
        if self.href is None:
            return "#"
        if callable(self.href):
            return self.href(row)
        if row is None:
            return self.href
        return self.href.format_map(_RowFields(row))

    def __repr__(self) -> str:
        return f"Action({self.key!r}, position={self.position!r})"
