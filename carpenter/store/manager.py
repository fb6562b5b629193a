"""Store driver manager."""

from carpenter.store.backends import ArrayStore, DatabaseStore
from carpenter.support.manager import Manager


class StoreManager(Manager):
    kind = "store"

    def create_array_driver(self) -> ArrayStore:
        return ArrayStore(self.config)

    def create_database_driver(self) -> DatabaseStore:
        return DatabaseStore(self.config)
