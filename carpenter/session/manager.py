"""Session driver manager."""

from carpenter.session.backends import ArraySession, DatabaseSession
from carpenter.support.manager import Manager


class SessionManager(Manager):
    kind = "session"

    def create_array_driver(self) -> ArraySession:
        return ArraySession(self.config)

    def create_database_driver(self) -> DatabaseSession:
        return DatabaseSession(self.config)
