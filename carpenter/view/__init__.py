"""Views - turn a built table into output.

Built-in drivers: ``jinja`` (HTML) and ``csv``.
"""

from carpenter.view.backends import CsvView, JinjaView, ViewDriver
from carpenter.view.manager import ViewManager

__all__ = [
    "CsvView",
    "JinjaView",
    "ViewDriver",
    "ViewManager",
]
