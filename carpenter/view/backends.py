"""View driver implementations.

- JinjaView: HTML through Jinja2 templates (packaged ``table.html`` plus any
  configured template directories, searched first)
- CsvView: spreadsheet-style export built from each cell's spreadsheet
  rendering; ignores the template name
"""

import csv
import io
import logging
from typing import Any, Optional, Protocol, runtime_checkable

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from carpenter.config import ViewConfig

logger = logging.getLogger(__name__)


@runtime_checkable
class ViewDriver(Protocol):
    """Protocol for view implementations."""

    def make(self, template: str, context: dict[str, Any]) -> str: ...


class JinjaView:
    """Renders tables to HTML with Jinja2."""

    def __init__(self, config: Optional[ViewConfig] = None):
        self.config = config or ViewConfig()

        loaders = [FileSystemLoader(d) for d in self.config.template_dirs]
        loaders.append(PackageLoader("carpenter", "view/templates"))

        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(["html", "htm", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["display"] = lambda value: "" if value is None else value

    def make(self, template: str, context: dict[str, Any]) -> str:
        logger.debug(f"Rendering template {template}")
        return self.env.get_template(template).render(**context)


class CsvView:
    """Renders tables to CSV text."""

    def __init__(self, config: Optional[ViewConfig] = None):
        self.config = config or ViewConfig()

    def make(self, template: str, context: dict[str, Any]) -> str:
        columns = context["columns"]
        buffer = io.StringIO()
        writer = csv.writer(buffer, delimiter=self.config.csv_delimiter, lineterminator="\n")

        writer.writerow([column.label for column in columns])
        for row in context["rows"]:
            writer.writerow(
                [row[column.key].render_spreadsheet_cell() for column in columns]
            )

        return buffer.getvalue()
