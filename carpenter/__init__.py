"""Carpenter - data tables for web applications.

Builds paginated, sortable, presentable tables from a data source:
- Tables registered by name with builder functions or "Type@method" refs
- Columns with presenters and spreadsheet-cell callbacks
- Pluggable store, session, view and paginator drivers
"""

from carpenter.carpenter import Carpenter, ClassMethodRef
from carpenter.components import NO_COLUMN, Action, Cell, Column, Row, SpreadsheetCell
from carpenter.config import CarpenterConfig, load_config
from carpenter.exceptions import (
    BuilderResolutionError,
    CarpenterCollectionError,
    CarpenterError,
    DriverNotFoundError,
    TableAlreadyBuilt,
    TableLocationNotFound,
)
from carpenter.table import Table

__version__ = "0.1.0"

__all__ = [
    "Action",
    "BuilderResolutionError",
    "Carpenter",
    "CarpenterCollectionError",
    "CarpenterConfig",
    "CarpenterError",
    "Cell",
    "ClassMethodRef",
    "Column",
    "DriverNotFoundError",
    "NO_COLUMN",
    "Row",
    "SpreadsheetCell",
    "Table",
    "TableAlreadyBuilt",
    "TableLocationNotFound",
    "load_config",
]
