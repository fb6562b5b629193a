"""Table orchestration.

A Table goes through two phases:

1. Declaration: the builder registers columns, actions and a data source
   and sets options (pagination, title, template, default sort).
2. Materialisation: on first access to rows/pagination or on render, the
   table reads session state, lets the store filter, sort, count and slice,
   asks the paginator for page metadata, and wraps every record in a Row.

Materialisation happens at most once. After it the structure is frozen, so
a rendered table always reflects a single, complete build.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional
from urllib.parse import urlencode

from carpenter.components.action import Action
from carpenter.components.column import Column
from carpenter.components.row import Row
from carpenter.config import CarpenterConfig
from carpenter.exceptions import CarpenterError, TableAlreadyBuilt
from carpenter.pagination.backends import coerce_page
from carpenter.pagination.manager import PaginationManager
from carpenter.pagination.schemas import PaginationMeta
from carpenter.schemas import ActionLink, ColumnSummary, RowPayload, TableResponse
from carpenter.session.manager import SessionManager
from carpenter.store.manager import StoreManager
from carpenter.support.records import default_label
from carpenter.view.manager import ViewManager

logger = logging.getLogger(__name__)

SORT_DIRECTIONS = ("asc", "desc")


def _validate_direction(direction: str) -> str:
    direction = direction.lower()
    if direction not in SORT_DIRECTIONS:
        raise ValueError(f"Sort direction must be 'asc' or 'desc', got '{direction}'")
    return direction


@dataclass(frozen=True)
class TableState:
    """Session state a table is built with."""

    sort: Optional[str] = None
    direction: Optional[str] = None
    filters: dict[str, Any] = field(default_factory=dict)
    page: int = 1


class Table:
    """A presentable, paginated table bound to one set of drivers."""

    def __init__(
        self,
        name: str,
        store: StoreManager,
        session: SessionManager,
        view: ViewManager,
        paginator: PaginationManager,
        config: Optional[CarpenterConfig] = None,
    ):
        self.name = name
        self.store_manager = store
        self.session_manager = session
        self.view_manager = view
        self.pagination_manager = paginator
        self.config = config or CarpenterConfig()

        self.title = default_label(name)
        self.template = self.config.view.template
        self.base_url = ""
        self.id_key = "id"
        self.per_page: Optional[int] = self.config.paginator.per_page

        self._columns: dict[str, Column] = {}
        self._actions: dict[tuple[str, str], Action] = {}
        self._store: Any = None
        self._session: Any = None
        self._default_sort: Optional[tuple[str, str]] = None

        self._rows: Optional[list[Row]] = None
        self._pagination: Optional[PaginationMeta] = None
        self._state: Optional[TableState] = None

    # ── Declaration ──────────────────────────────────────

    def _ensure_mutable(self) -> None:
        if self.is_built:
            raise TableAlreadyBuilt(self.name)

    @property
    def is_built(self) -> bool:
        return self._rows is not None

    def column(self, key: str) -> Column:
        """Get a column by key, creating it (in declaration order) if new."""
        if key not in self._columns:
            self._ensure_mutable()
            self._columns[key] = Column(key, table_name=self.name)
        return self._columns[key]

    def source(self, source: Any, driver: Optional[str] = None) -> "Table":
        """Hand a data source to a store driver (default: configured driver)."""
        self._ensure_mutable()
        store = self.store_manager.driver(driver)
        store.set_source(source)
        self._store = store
        return self

    def data(self, records: Any, driver: Optional[str] = None) -> "Table":
        """Use an in-memory sequence of records."""
        return self.source(records, driver or "array")

    def query(self, sql: str, params: tuple = (), driver: Optional[str] = None) -> "Table":
        """Use the results of a SQL query."""
        return self.source((sql, tuple(params)), driver or "database")

    def action(self, key: str, position: str = "table") -> Action:
        """Get or create a table-level or row-level action."""
        if (position, key) not in self._actions:
            self._ensure_mutable()
            self._actions[(position, key)] = Action(key, position)
        return self._actions[(position, key)]

    def paginate(self, per_page: Optional[int]) -> "Table":
        """Set the page size; None shows every record."""
        self._ensure_mutable()
        if per_page is not None and per_page <= 0:
            raise ValueError(f"per_page must be positive, got {per_page}")
        self.per_page = per_page
        return self

    def set_title(self, title: str) -> "Table":
        self._ensure_mutable()
        self.title = title
        return self

    def set_template(self, template: str) -> "Table":
        self._ensure_mutable()
        self.template = template
        return self

    def set_base_url(self, base_url: str) -> "Table":
        self._ensure_mutable()
        self.base_url = base_url
        return self

    def set_id_key(self, id_key: str) -> "Table":
        self._ensure_mutable()
        self.id_key = id_key
        return self

    def default_sort(self, key: str, direction: str = "asc") -> "Table":
        """Sort applied when the session holds no (valid) sort."""
        self._ensure_mutable()
        self._default_sort = (key, _validate_direction(direction))
        return self

    # ── Session state ────────────────────────────────────

    @property
    def session(self) -> Any:
        if self._session is None:
            self._session = self.session_manager.driver()
        return self._session

    def bind_session(self, session_id: str) -> "Table":
        """Scope the session driver to one client session."""
        self._ensure_mutable()
        self.session.bind(session_id)
        return self

    def _state_key(self, field: str) -> str:
        return f"carpenter.{self.name}.{field}"

    def update_state(
        self,
        sort: Optional[str] = None,
        direction: Optional[str] = None,
        page: Optional[Any] = None,
        filters: Optional[dict[str, Any]] = None,
    ) -> "Table":
        """Write sort, filter and page state to the session.

        Sorting by a column without a direction toggles asc/desc when the
        table is already sorted by that column. Changing the sort or the
        filters sends the table back to page 1 unless a page is given.
        """
        self._ensure_mutable()
        session = self.session
        reset_page = False

        if sort is not None:
            if direction is None:
                current_sort = session.get(self._state_key("sort"))
                current_dir = session.get(self._state_key("dir"), "asc")
                direction = "desc" if current_sort == sort and current_dir == "asc" else "asc"
            session.put(self._state_key("sort"), sort)
            session.put(self._state_key("dir"), _validate_direction(direction))
            reset_page = True
        elif direction is not None:
            session.put(self._state_key("dir"), _validate_direction(direction))

        if filters is not None:
            active = {k: v for k, v in filters.items() if v is not None and v != ""}
            session.put(self._state_key("filters"), active)
            reset_page = True

        if page is not None:
            session.put(self._state_key("page"), coerce_page(page))
        elif reset_page:
            session.put(self._state_key("page"), 1)

        return self

    @property
    def state(self) -> TableState:
        """Sort, filter and page state the table is (or will be) built with.

        Read from the session until the table is built; afterwards the
        snapshot taken during the build is returned, so output always
        describes the rows it holds.
        """
        if self._state is not None:
            return self._state
        return self._read_state()

    def _read_state(self) -> TableState:
        sort_key, direction = self._read_sort()
        return TableState(
            sort=sort_key,
            direction=direction,
            filters=self._read_filters(),
            page=coerce_page(self.session.get(self._state_key("page"), 1)),
        )

    def _read_sort(self) -> tuple[Optional[str], Optional[str]]:
        key = self.session.get(self._state_key("sort"))
        if key is not None:
            column = self._columns.get(key)
            direction = str(self.session.get(self._state_key("dir"), "asc")).lower()
            if column is not None and column.sortable and direction in SORT_DIRECTIONS:
                return key, direction
            logger.warning(f"Table '{self.name}': ignoring invalid sort '{key}' ({direction})")

        if self._default_sort is not None:
            return self._default_sort
        return None, None

    def _read_filters(self) -> dict[str, Any]:
        filters = self.session.get(self._state_key("filters")) or {}
        active = {}
        for key, value in filters.items():
            if key not in self._columns:
                logger.warning(f"Table '{self.name}': ignoring filter on unknown column '{key}'")
                continue
            active[key] = value
        return active

    @property
    def sort_state(self) -> tuple[Optional[str], Optional[str]]:
        """Effective (column key, direction), or (None, None) when unsorted."""
        state = self.state
        return state.sort, state.direction

    @property
    def active_filters(self) -> dict[str, Any]:
        """Session filters restricted to declared columns."""
        return dict(self.state.filters)

    def sort_direction(self, column: Column) -> Optional[str]:
        """Direction the table is sorted by this column, if it is."""
        key, direction = self.sort_state
        return direction if key == column.key else None

    def _query_params(self, state: Optional[TableState] = None) -> dict[str, Any]:
        state = state or self.state
        params: dict[str, Any] = {}
        if state.sort is not None:
            params["sort"] = state.sort
            params["dir"] = state.direction
        for filter_key, value in state.filters.items():
            params[f"filter[{filter_key}]"] = value
        return params

    def sort_url(self, column: Column) -> str:
        """Link that sorts by this column, flipping direction if already sorted."""
        next_direction = "desc" if self.sort_direction(column) == "asc" else "asc"
        params = {k: v for k, v in self._query_params().items() if k not in ("sort", "dir")}
        params = {"sort": column.key, "dir": next_direction, **params}
        return f"{self.base_url}?{urlencode(params)}"

    # ── Materialisation ──────────────────────────────────

    def build(self) -> "Table":
        """Fetch records and build rows, once."""
        if self._rows is None:
            self._materialise()
        return self

    def _materialise(self) -> None:
        if self._store is None:
            raise CarpenterError(f"Table '{self.name}' has no data source")

        state = self._read_state()
        store = self._store
        store.apply_filters(state.filters)

        if state.sort is not None:
            store.order_by(state.sort, state.direction)

        total = store.count()

        if self.per_page:
            paginator = self.pagination_manager.driver()
            pagination = paginator.paginate(
                total=total,
                per_page=self.per_page,
                page=state.page,
                base_url=self.base_url,
                query=self._query_params(state),
            )
            records = store.results(offset=pagination.offset, limit=pagination.per_page)
        else:
            pagination = PaginationMeta.single_page(total)
            records = store.results()

        columns = list(self._columns.values())
        rows = [Row(record, columns, id_key=self.id_key) for record in records]

        for column in columns:
            column.freeze()

        self._state = state
        self._pagination = pagination
        self._rows = rows
        logger.debug(
            f"Built table '{self.name}': {len(rows)} rows "
            f"(page {pagination.page}/{pagination.last_page}, {total} total)"
        )

    @property
    def columns(self) -> list[Column]:
        return list(self._columns.values())

    @property
    def visible_columns(self) -> list[Column]:
        return [c for c in self._columns.values() if c.visible]

    @property
    def table_actions(self) -> list[Action]:
        return [a for (position, _), a in self._actions.items() if position == "table"]

    @property
    def row_actions(self) -> list[Action]:
        return [a for (position, _), a in self._actions.items() if position == "row"]

    @property
    def rows(self) -> list[Row]:
        """Built rows of the current page.

        Cells only hold weak references to their columns, and the columns
        belong to this table. Keep the Table alive while rows are in use:
        once it is collected, ``Cell.column`` is None and
        ``render_spreadsheet_cell()`` returns NO_COLUMN.
        """
        self.build()
        return self._rows

    @property
    def pagination(self) -> PaginationMeta:
        self.build()
        return self._pagination

    @property
    def total(self) -> int:
        return self.pagination.total

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    # ── Output ───────────────────────────────────────────

    def _view_context(self) -> dict[str, Any]:
        return {
            "table": self,
            "title": self.title,
            "columns": self.visible_columns,
            "rows": self.rows,
            "pagination": self.pagination,
            "table_actions": self.table_actions,
            "row_actions": self.row_actions,
        }

    def render(self, template: Optional[str] = None, driver: Optional[str] = None) -> str:
        """Render the table through a view driver (default: configured driver)."""
        self.build()
        view = self.view_manager.driver(driver)
        return view.make(template or self.template, self._view_context())

    def to_csv(self) -> str:
        return self.render(driver="csv")

    def to_dict(self) -> TableResponse:
        """Serialisable snapshot of the built table."""
        self.build()
        sort_key, sort_direction = self.sort_state
        row_actions = self.row_actions
        return TableResponse(
            name=self.name,
            title=self.title,
            columns=[
                ColumnSummary(
                    key=c.key,
                    label=c.label,
                    sortable=c.sortable,
                    direction=self.sort_direction(c),
                )
                for c in self.visible_columns
            ],
            rows=[
                RowPayload(
                    id=row.id,
                    cells={c.key: row[c.key].value for c in self.visible_columns},
                    actions=[
                        ActionLink(key=a.key, label=a.label, href=a.href_for(row))
                        for a in row_actions
                    ],
                )
                for row in self.rows
            ],
            actions=[
                ActionLink(key=a.key, label=a.label, href=a.href_for())
                for a in self.table_actions
            ],
            pagination=self.pagination,
            sort=sort_key,
            direction=sort_direction,
            filters=self.active_filters,
        )

    def __repr__(self) -> str:
        return f"Table({self.name!r}, columns={list(self._columns)})"
