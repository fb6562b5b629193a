"""Database layer for the database store and session drivers.

Supports two backends:
- PostgreSQL (database_url starting with postgres://)
- SQLite (any other value is treated as a file path)

Uses raw SQL via psycopg2 (Postgres) or sqlite3 (SQLite). No ORM: the
store driver runs whatever query the table was given.

Postgres uses a ThreadedConnectionPool per URL. SQLite uses per-call
connections with check_same_thread=False.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_SQLITE_FILE = "carpenter.db"

_initialized: set[str] = set()
_pg_pools: dict[str, Any] = {}


def _is_postgres(database_url: str) -> bool:
    """Check if the URL points at Postgres."""
    return database_url.startswith("postgres")


def _sqlite_path(database_url: str) -> Path:
    """Resolve the SQLite file for a non-Postgres URL."""
    if not database_url:
        return Path.cwd() / DEFAULT_SQLITE_FILE
    if database_url.startswith("sqlite:///"):
        return Path(database_url[len("sqlite:///"):])
    return Path(database_url)


def _get_pg_pool(database_url: str):
    """Get or create the Postgres connection pool for a URL (lazy)."""
    pool = _pg_pools.get(database_url)
    if pool is None:
        import psycopg2.pool

        pool = psycopg2.pool.ThreadedConnectionPool(
            minconn=1,
            maxconn=5,
            dsn=database_url,
        )
        _pg_pools[database_url] = pool
        logger.info("PostgreSQL connection pool initialized (1-5 connections)")
    return pool


@contextmanager
def get_connection(database_url: str = ""):
    """Get a database connection (Postgres or SQLite).

    Usage:
        with get_connection(url) as conn:
            cursor = conn.cursor()
            cursor.execute(...)
            conn.commit()
    """
    if _is_postgres(database_url):
        pool = _get_pg_pool(database_url)
        conn = pool.getconn()
        try:
            yield conn
        finally:
            pool.putconn(conn)
    else:
        conn = sqlite3.connect(str(_sqlite_path(database_url)), check_same_thread=False)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()


def quote_identifier(name: str) -> str:
    """Quote a column identifier; dotted keys are quoted as one name."""
    return '"' + name.replace('"', '""') + '"'


def _json_dumps(data: Any) -> str:
    """Serialize data to JSON string for storage."""
    if data is None:
        return "null"
    return json.dumps(data, ensure_ascii=False, default=str)


def _json_loads(text: Any) -> Any:
    """Deserialize JSON string from storage."""
    if text is None or text == "":
        return None
    if isinstance(text, (dict, list)):
        return text  # Already parsed (Postgres JSONB)
    return json.loads(text)


def execute(
    sql: str,
    params: tuple = (),
    fetch: str = "none",
    database_url: str = "",
) -> Any:
    """Execute a SQL statement.

    Args:
        sql: SQL statement (use %s placeholders, adapted to ? for SQLite)
        params: Parameters tuple
        fetch: "none", "one", "all"
        database_url: Target database (see module docstring)

    Returns:
        None for "none", dict for "one", list[dict] for "all"
    """
    if _is_postgres(database_url):
        adapted_sql = sql
    else:
        adapted_sql = sql.replace("%s", "?")

    with get_connection(database_url) as conn:
        cursor = conn.cursor()
        cursor.execute(adapted_sql, tuple(params))

        if fetch == "none":
            conn.commit()
            return None
        elif fetch == "one":
            row = cursor.fetchone()
            if row is None:
                return None
            if _is_postgres(database_url):
                columns = [desc[0] for desc in cursor.description]
                return dict(zip(columns, row))
            return dict(row)
        elif fetch == "all":
            rows = cursor.fetchall()
            if _is_postgres(database_url):
                columns = [desc[0] for desc in cursor.description]
                return [dict(zip(columns, row)) for row in rows]
            return [dict(row) for row in rows]

        raise ValueError(f"Unknown fetch mode: {fetch}")


def init_db(database_url: str = "") -> None:
    """Create the session table if it doesn't exist."""
    if database_url in _initialized:
        return

    if _is_postgres(database_url):
        ddl = """
        CREATE TABLE IF NOT EXISTS carpenter_sessions (
            session_id VARCHAR(100) NOT NULL,
            state_key VARCHAR(200) NOT NULL,
            state_value JSONB,
            updated_at TIMESTAMP DEFAULT NOW(),
            PRIMARY KEY (session_id, state_key)
        );
        """
        with get_connection(database_url) as conn:
            cursor = conn.cursor()
            cursor.execute(ddl)
            conn.commit()
        backend = "PostgreSQL"
    else:
        ddl = """
        CREATE TABLE IF NOT EXISTS carpenter_sessions (
            session_id TEXT NOT NULL,
            state_key TEXT NOT NULL,
            state_value TEXT,
            updated_at TEXT,
            PRIMARY KEY (session_id, state_key)
        );
        """
        with get_connection(database_url) as conn:
            cursor = conn.cursor()
            cursor.executescript(ddl)
            conn.commit()
        backend = f"SQLite ({_sqlite_path(database_url)})"

    _initialized.add(database_url)
    logger.info(f"Carpenter session storage initialized: {backend}")
