"""Session driver implementations.

Sessions keep per-table sort, filter and page state between requests.
Values are scoped by a session id that the HTTP layer binds from a cookie.

- ArraySession: plain dict, lives as long as the table build
- DatabaseSession: rows in the carpenter_sessions table (SQLite / Postgres)
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional, Protocol, runtime_checkable

from carpenter import db
from carpenter.config import SessionConfig

logger = logging.getLogger(__name__)


@runtime_checkable
class SessionDriver(Protocol):
    """Protocol for session implementations."""

    session_id: str

    def bind(self, session_id: str) -> None: ...

    def get(self, key: str, default: Any = None) -> Any: ...

    def put(self, key: str, value: Any) -> None: ...

    def has(self, key: str) -> bool: ...

    def forget(self, key: str) -> None: ...


class ArraySession:
    """In-memory session state."""

    def __init__(self, config: Optional[SessionConfig] = None):
        self.config = config or SessionConfig()
        self.session_id = self.config.session_id
        self._data: dict[str, dict[str, Any]] = {}

    def bind(self, session_id: str) -> None:
        self.session_id = session_id

    def _bucket(self) -> dict[str, Any]:
        return self._data.setdefault(self.session_id, {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._bucket().get(key, default)

    def put(self, key: str, value: Any) -> None:
        self._bucket()[key] = value

    def has(self, key: str) -> bool:
        return key in self._bucket()

    def forget(self, key: str) -> None:
        self._bucket().pop(key, None)


class DatabaseSession:
    """Session state persisted as JSON values in the database."""

    def __init__(self, config: Optional[SessionConfig] = None):
        self.config = config or SessionConfig()
        self.session_id = self.config.session_id
        self.database_url = self.config.database_url
        db.init_db(self.database_url)

    def bind(self, session_id: str) -> None:
        self.session_id = session_id

    def get(self, key: str, default: Any = None) -> Any:
        row = db.execute(
            "SELECT state_value FROM carpenter_sessions WHERE session_id = %s AND state_key = %s",
            (self.session_id, key),
            fetch="one",
            database_url=self.database_url,
        )
        if row is None:
            return default
        return db._json_loads(row["state_value"])

    def put(self, key: str, value: Any) -> None:
        now = datetime.now(timezone.utc).isoformat()
        db.execute(
            """INSERT INTO carpenter_sessions (session_id, state_key, state_value, updated_at)
               VALUES (%s, %s, %s, %s)
               ON CONFLICT (session_id, state_key)
               DO UPDATE SET state_value = excluded.state_value, updated_at = excluded.updated_at""",
            (self.session_id, key, db._json_dumps(value), now),
            database_url=self.database_url,
        )
        logger.debug(f"Session {self.session_id}: stored {key}")

    def has(self, key: str) -> bool:
        row = db.execute(
            "SELECT 1 AS found FROM carpenter_sessions WHERE session_id = %s AND state_key = %s",
            (self.session_id, key),
            fetch="one",
            database_url=self.database_url,
        )
        return row is not None

    def forget(self, key: str) -> None:
        db.execute(
            "DELETE FROM carpenter_sessions WHERE session_id = %s AND state_key = %s",
            (self.session_id, key),
            database_url=self.database_url,
        )
