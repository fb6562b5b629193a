"""Session state for sorting, filtering and paging.

Built-in drivers: ``array`` and ``database``.
"""

from carpenter.session.backends import ArraySession, DatabaseSession, SessionDriver
from carpenter.session.manager import SessionManager

__all__ = [
    "ArraySession",
    "DatabaseSession",
    "SessionDriver",
    "SessionManager",
]
