"""Spreadsheet representation of a single cell value.

Used for CSV / spreadsheet exports. A column can register a callback that
receives the SpreadsheetCell and adjusts its data type and formats before
it is rendered.
"""

from typing import Any, Optional

DATA_TYPES = ("string", "numeric", "boolean", "date")


class SpreadsheetCell:
    """Export-ready value with formatting hints."""

    def __init__(self, value: Any, row_id: Any = None):
        self.value = value
        self.row_id = row_id
        self.data_type = "string"
        self.number_format: Optional[str] = None
        self.date_format: Optional[str] = None

    def set_value(self, value: Any) -> "SpreadsheetCell":
        self.value = value
        return self

    def set_data_type(self, data_type: str) -> "SpreadsheetCell":
        if data_type not in DATA_TYPES:
            raise ValueError(
                f"Unknown spreadsheet data type: '{data_type}'. Expected one of {DATA_TYPES}"
            )
        self.data_type = data_type
        return self

    def set_number_format(self, number_format: str) -> "SpreadsheetCell":
        """Python format spec applied to numeric values, e.g. ``,.2f``."""
        self.number_format = number_format
        self.data_type = "numeric"
        return self

    def set_date_format(self, date_format: str) -> "SpreadsheetCell":
        """strftime pattern applied to date values, e.g. ``%d/%m/%Y``."""
        self.date_format = date_format
        self.data_type = "date"
        return self

    def render(self) -> str:
        """Render the value as spreadsheet text according to its data type."""
        value = self.value
        if value is None:
            return ""

        if self.data_type == "boolean":
            return "TRUE" if value else "FALSE"

        if self.data_type == "date":
            if self.date_format and hasattr(value, "strftime"):
                return value.strftime(self.date_format)
            if hasattr(value, "isoformat"):
                return value.isoformat()
            return str(value)

        if self.data_type == "numeric":
            number = float(value) if isinstance(value, str) else value
            if self.number_format:
                return format(number, self.number_format)
            return str(number)

        return str(value)

    def __repr__(self) -> str:
        return f"SpreadsheetCell({self.value!r}, row_id={self.row_id!r}, data_type={self.data_type!r})"
