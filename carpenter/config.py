"""Carpenter configuration.

One structured object with a sub-config per manager (store, session, view,
paginator) plus the legacy ``tables.location`` path. Loaded from YAML, with
every key optional so an empty file yields a working in-memory setup.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CARPENTER_CONFIG"


class StoreConfig(BaseModel):
    """Data store selection."""

    driver: str = Field(
        default="array",
        description="Default store driver: 'array', 'database' or an extension key",
    )
    database_url: str = Field(
        default="",
        description="postgres://... for PostgreSQL, otherwise a SQLite file path "
        "(empty = carpenter.db in the working directory)",
    )


class SessionConfig(BaseModel):
    """Where sort, filter and page state is kept between requests."""

    driver: str = Field(
        default="array",
        description="'array' (lives for one table build) or 'database'",
    )
    database_url: str = Field(default="")
    session_id: str = Field(
        default="default",
        description="Session scope used until Table.bind_session() is called",
    )


class ViewConfig(BaseModel):
    """Rendering backend selection."""

    driver: str = Field(default="jinja", description="'jinja', 'csv' or an extension key")
    template: str = Field(default="table.html", description="Default table template")
    template_dirs: list[str] = Field(
        default_factory=list,
        description="Extra template directories searched before the packaged templates",
    )
    csv_delimiter: str = Field(default=",")


class PaginatorConfig(BaseModel):
    """Pagination link generation."""

    driver: str = Field(default="default", description="'default' or 'simple'")
    per_page: Optional[int] = Field(
        default=None,
        description="Page size applied to every table unless Table.paginate() overrides it",
    )
    window: int = Field(
        default=3,
        description="Number of page links shown either side of the current page",
    )
    page_param: str = Field(default="page")


class TablesConfig(BaseModel):
    """Legacy bulk registration."""

    location: Optional[str] = Field(
        default=None,
        description="Python file that calls carpenter.add(...) for each table",
    )


class CarpenterConfig(BaseModel):
    """Top-level configuration passed to Carpenter."""

    store: StoreConfig = Field(default_factory=StoreConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    view: ViewConfig = Field(default_factory=ViewConfig)
    paginator: PaginatorConfig = Field(default_factory=PaginatorConfig)
    tables: TablesConfig = Field(default_factory=TablesConfig)


def load_config(path: Optional[Union[str, Path]] = None) -> CarpenterConfig:
    """Load configuration from a YAML file.

    Args:
        path: YAML file to read. Falls back to the CARPENTER_CONFIG
              environment variable, then to built-in defaults.

    Returns:
        Validated CarpenterConfig

    Raises:
        pydantic.ValidationError: If the file contents do not match the schema
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)

    if not path:
        logger.debug("No configuration file given, using defaults")
        return CarpenterConfig()

    config_file = Path(path)
    if not config_file.exists():
        logger.warning(f"Configuration file not found: {config_file}, using defaults")
        return CarpenterConfig()

    with open(config_file, "r") as f:
        data: Any = yaml.safe_load(f) or {}

    config = CarpenterConfig.model_validate(data)
    logger.info(f"Loaded configuration from {config_file}")
    return config
