"""Base driver manager.

A manager resolves a named driver for one concern (store, session, view,
paginator). Resolution order:
- extension factories registered through Carpenter.extend()
- built-in ``create_<name>_driver`` methods on the subclass

Managers are created fresh for every table build, so resolved drivers are
never shared between tables.
"""

import logging
from typing import Any, Callable, Optional

from pydantic import BaseModel

from carpenter.exceptions import DriverNotFoundError

logger = logging.getLogger(__name__)

# Extension factories receive the manager's config model and return a driver
DriverFactory = Callable[[Any], Any]


class Manager:
    """Resolves and caches drivers for a single table build."""

    kind: str = ""

    def __init__(
        self,
        config: BaseModel,
        extensions: Optional[dict[str, DriverFactory]] = None,
    ):
        self.config = config
        self.extensions: dict[str, DriverFactory] = dict(extensions or {})
        self._drivers: dict[str, Any] = {}

    def get_default_driver(self) -> str:
        """Driver used when none is named explicitly."""
        return getattr(self.config, "driver")

    def driver(self, name: Optional[str] = None) -> Any:
        """Get a driver instance by name, creating it on first use."""
        name = name or self.get_default_driver()
        if name not in self._drivers:
            self._drivers[name] = self._create_driver(name)
        return self._drivers[name]

    def _create_driver(self, name: str) -> Any:
        if name in self.extensions:
            logger.debug(f"Resolving {self.kind} driver '{name}' from extension")
            return self.extensions[name](self.config)

        creator = getattr(self, f"create_{name}_driver", None)
        if creator is None:
            raise DriverNotFoundError(self.kind, name, self.available_drivers())

        logger.debug(f"Resolving built-in {self.kind} driver '{name}'")
        return creator()

    def available_drivers(self) -> list[str]:
        """Names of every driver this manager can build."""
        builtin = [
            attr[len("create_"):-len("_driver")]
            for attr in dir(self)
            if attr.startswith("create_") and attr.endswith("_driver")
        ]
        return sorted(set(builtin) | set(self.extensions))
