"""Data stores - where a table's records come from.

Built-in drivers: ``array`` (in-memory records) and ``database`` (SQL query).
Further drivers are registered with Carpenter.extend("store", key, factory).
"""

from carpenter.store.backends import ArrayStore, DatabaseStore, StoreDriver
from carpenter.store.manager import StoreManager

__all__ = [
    "ArrayStore",
    "DatabaseStore",
    "StoreDriver",
    "StoreManager",
]
