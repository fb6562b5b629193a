"""Store driver implementations.

A store holds a table's data source and answers three questions once
filters and ordering have been applied: how many records match, and which
records fall in a given offset/limit window.

- ArrayStore: any in-memory iterable of mappings or objects
- DatabaseStore: a SQL query run through carpenter.db (SQLite / Postgres)
"""

import logging
from typing import Any, Iterable, Optional, Protocol, Union, runtime_checkable

from carpenter import db
from carpenter.config import StoreConfig
from carpenter.support.records import get_field, matches_filter, sort_key

logger = logging.getLogger(__name__)


@runtime_checkable
class StoreDriver(Protocol):
    """Protocol for store implementations."""

    def set_source(self, source: Any) -> None: ...

    def apply_filters(self, filters: dict[str, Any]) -> None: ...

    def order_by(self, key: str, direction: str = "asc") -> None: ...

    def count(self) -> int: ...

    def results(
        self,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[Any]: ...


class ArrayStore:
    """Store backed by an in-memory sequence of records."""

    def __init__(self, config: Optional[StoreConfig] = None):
        self.config = config or StoreConfig()
        self._records: list[Any] = []
        self._filters: dict[str, Any] = {}
        self._order: Optional[tuple[str, str]] = None

    def set_source(self, source: Iterable[Any]) -> None:
        self._records = list(source)

    def apply_filters(self, filters: dict[str, Any]) -> None:
        self._filters = dict(filters)

    def order_by(self, key: str, direction: str = "asc") -> None:
        self._order = (key, direction)

    def _matching(self) -> list[Any]:
        records = [
            record
            for record in self._records
            if all(
                matches_filter(get_field(record, key), expected)
                for key, expected in self._filters.items()
            )
        ]
        if self._order is not None:
            key, direction = self._order
            records.sort(
                key=lambda record: sort_key(get_field(record, key)),
                reverse=direction == "desc",
            )
        return records

    def count(self) -> int:
        return len(self._matching())

    def results(
        self,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[Any]:
        start = offset or 0
        end = start + limit if limit is not None else None
        return self._matching()[start:end]


class DatabaseStore:
    """Store that wraps a SQL query.

    The table's query is used as a subquery so filtering, ordering and
    paging are layered on top without parsing it. Only keys the table has
    declared as columns ever reach this class.
    """

    def __init__(self, config: Optional[StoreConfig] = None):
        self.config = config or StoreConfig()
        self.database_url = self.config.database_url
        self._sql: Optional[str] = None
        self._params: tuple = ()
        self._filters: dict[str, Any] = {}
        self._order: Optional[tuple[str, str]] = None

    def set_source(self, source: Union[str, tuple[str, Iterable[Any]]]) -> None:
        """Set the query: a SQL string or a ``(sql, params)`` pair."""
        if isinstance(source, str):
            self._sql, self._params = source, ()
        else:
            sql, params = source
            self._sql, self._params = sql, tuple(params)

    def apply_filters(self, filters: dict[str, Any]) -> None:
        self._filters = dict(filters)

    def order_by(self, key: str, direction: str = "asc") -> None:
        self._order = (key, direction)

    def _from_clause(self) -> tuple[str, list[Any]]:
        if self._sql is None:
            raise ValueError("DatabaseStore has no query; call Table.query() first")

        sql = f"FROM ({self._sql.strip().rstrip(';')}) AS carpenter_source"
        params: list[Any] = list(self._params)

        clauses = []
        for key, value in self._filters.items():
            if value is None or value == "":
                continue
            column = db.quote_identifier(key)
            if isinstance(value, str):
                clauses.append(f"LOWER(CAST({column} AS TEXT)) LIKE %s")
                params.append(f"%{value.lower()}%")
            else:
                clauses.append(f"{column} = %s")
                params.append(value)

        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        return sql, params

    def count(self) -> int:
        from_clause, params = self._from_clause()
        row = db.execute(
            f"SELECT COUNT(*) AS total {from_clause}",
            tuple(params),
            fetch="one",
            database_url=self.database_url,
        )
        return int(row["total"]) if row else 0

    def results(
        self,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        from_clause, params = self._from_clause()
        sql = f"SELECT * {from_clause}"

        if self._order is not None:
            key, direction = self._order
            sql += f" ORDER BY {db.quote_identifier(key)} {'DESC' if direction == 'desc' else 'ASC'}"

        if limit is not None:
            sql += " LIMIT %s"
            params.append(limit)
        elif offset and not db._is_postgres(self.database_url):
            # SQLite only accepts OFFSET after a LIMIT
            sql += " LIMIT -1"
        if offset:
            sql += " OFFSET %s"
            params.append(offset)

        logger.debug(f"DatabaseStore query: {sql}")
        return db.execute(sql, tuple(params), fetch="all", database_url=self.database_url)
