"""Carpenter - the table registry and build entry point.

Holds:
- the table collection: name -> builder (callable or "Type@method" string)
- class bindings: type name -> factory, used to resolve "Type@method"
- manager extensions: kind -> driver key -> driver factory

One Carpenter is constructed at application bootstrap and passed to
whatever needs tables. Every get()/make() creates new store, session, view
and paginator managers for that table only.
"""

import logging
import runpy
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Union

from carpenter.config import CarpenterConfig
from carpenter.exceptions import (
    BuilderResolutionError,
    CarpenterCollectionError,
    TableLocationNotFound,
)
from carpenter.pagination.manager import PaginationManager
from carpenter.session.manager import SessionManager
from carpenter.store.manager import StoreManager
from carpenter.support.manager import DriverFactory
from carpenter.table import Table
from carpenter.view.manager import ViewManager

logger = logging.getLogger(__name__)

MANAGER_KINDS = ("store", "session", "view", "paginator")

TableBuilder = Callable[[Table], Any]
TableCallback = Callable[[Table], Any]


@dataclass(frozen=True)
class ClassMethodRef:
    """Reference to ``method_name`` on an instance of a bound type."""

    type_name: str
    method_name: str = "build"


BuilderRef = Union[TableBuilder, ClassMethodRef, str]


class Carpenter:
    """Registry of table builders and factory for built tables."""

    def __init__(self, config: Optional[Union[CarpenterConfig, dict[str, Any]]] = None):
        if config is None:
            config = CarpenterConfig()
        elif isinstance(config, dict):
            config = CarpenterConfig.model_validate(config)
        self.config = config

        self._collection: dict[str, BuilderRef] = {}
        self._bindings: dict[str, Callable[[], Any]] = {}
        self._extensions: dict[str, dict[str, DriverFactory]] = {
            kind: {} for kind in MANAGER_KINDS
        }
        self._loaded_locations: set[Path] = set()

    # ── Registration ─────────────────────────────────────

    def add(self, name: str, builder: BuilderRef) -> None:
        """Register a table builder; an existing name is overwritten."""
        if name in self._collection:
            logger.debug(f"Replacing table builder: {name}")
        self._collection[name] = builder
        logger.debug(f"Registered table: {name}")

    def bind(self, type_name: str, factory: Callable[[], Any]) -> "Carpenter":
        """Make ``type_name`` resolvable in "Type@method" builders."""
        self._bindings[type_name] = factory
        return self

    def extend(self, manager: str, key: str, extension: DriverFactory) -> "Carpenter":
        """Register a driver factory for one of the managers.

        Args:
            manager: 'store', 'session', 'view' or 'paginator'
            key: Driver name tables select it by
            extension: Callable receiving the manager config, returning a driver

        Returns:
            self, for chaining
        """
        if manager not in self._extensions:
            raise ValueError(
                f"Unknown manager: '{manager}'. Expected one of {MANAGER_KINDS}"
            )
        self._extensions[manager][key] = extension
        logger.debug(f"Registered {manager} extension: {key}")
        return self

    # ── Lookup ───────────────────────────────────────────

    def has(self, name: str) -> bool:
        return name in self._collection

    def list_keys(self) -> list[str]:
        return list(self._collection.keys())

    def count(self) -> int:
        return len(self._collection)

    # ── Building ─────────────────────────────────────────

    def get(self, name: str, callback: Optional[TableCallback] = None) -> Table:
        """Build a registered table.

        Args:
            name: Registered table name
            callback: Optional hook run on the table after the builder

        Returns:
            The freshly built Table

        Raises:
            CarpenterCollectionError: If no table is registered under name
            BuilderResolutionError: If a "Type@method" builder cannot be resolved
        """
        if name not in self._collection:
            raise CarpenterCollectionError(name)

        builder = self._resolve_builder(self._collection[name])
        table = self._build_table(name, builder)

        if callback is not None:
            callback(table)

        return table

    def make(self, name: str, builder: TableBuilder) -> Table:
        """Build a table directly from a callable, bypassing the collection."""
        if not callable(builder):
            raise TypeError(f"Table builder for '{name}' must be callable")
        return self._build_table(name, builder)

    def _build_table(self, name: str, builder: TableBuilder) -> Table:
        store, session, view, paginator = self._create_managers()

        table = Table(name, store, session, view, paginator, self.config)
        builder(table)

        return table

    def _resolve_builder(self, builder: BuilderRef) -> TableBuilder:
        if isinstance(builder, str):
            builder = self.parse_class_callback(builder)
        if isinstance(builder, ClassMethodRef):
            return self._build_class_callback(builder)
        return builder

    def _build_class_callback(self, ref: ClassMethodRef) -> TableBuilder:
        """Turn a ClassMethodRef into a callable on a fresh instance."""
        factory = self._bindings.get(ref.type_name)
        if factory is None:
            raise BuilderResolutionError(
                f"No type bound for '{ref.type_name}'. "
                f"Bound types: {sorted(self._bindings)}"
            )

        def callback(table: Table) -> Any:
            instance = factory()
            method = getattr(instance, ref.method_name, None)
            if not callable(method):
                raise BuilderResolutionError(
                    f"'{ref.type_name}' has no method '{ref.method_name}'"
                )
            return method(table)

        return callback

    @staticmethod
    def parse_class_callback(ref: str) -> ClassMethodRef:
        """Split "Type@method" into its parts; the method defaults to build."""
        if "@" in ref:
            type_name, method_name = ref.split("@", 1)
            return ClassMethodRef(type_name, method_name or "build")
        return ClassMethodRef(ref, "build")

    def _create_managers(self) -> tuple[StoreManager, SessionManager, ViewManager, PaginationManager]:
        return (
            StoreManager(self.config.store, self._extensions["store"]),
            SessionManager(self.config.session, self._extensions["session"]),
            ViewManager(self.config.view, self._extensions["view"]),
            PaginationManager(self.config.paginator, self._extensions["paginator"]),
        )

    # ── Legacy bulk registration ─────────────────────────

    def load_tables(self) -> None:
        """Run the configured tables file, which registers tables via add().

        Deprecated: register tables in application bootstrap code instead.
        The file is executed with ``carpenter`` bound to this instance and
        is only run once per path.

        Raises:
            TableLocationNotFound: If tables.location is unset or missing
        """
        warnings.warn(
            "Carpenter.load_tables() is deprecated; register tables with add() "
            "during application startup",
            DeprecationWarning,
            stacklevel=2,
        )

        location = self.config.tables.location
        if not location or not Path(location).is_file():
            raise TableLocationNotFound(location)

        path = Path(location).resolve()
        if path in self._loaded_locations:
            return

        before = self.count()
        runpy.run_path(str(path), init_globals={"carpenter": self})
        self._loaded_locations.add(path)
        logger.info(f"Loaded tables from {path} ({self.count() - before} new)")
