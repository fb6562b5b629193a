"""View driver manager."""

from carpenter.support.manager import Manager
from carpenter.view.backends import CsvView, JinjaView


class ViewManager(Manager):
    kind = "view"

    def create_jinja_driver(self) -> JinjaView:
        return JinjaView(self.config)

    def create_csv_driver(self) -> CsvView:
        return CsvView(self.config)
