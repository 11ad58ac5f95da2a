"""Managed layouts.

A managed layout is a layout file (as written by `i3-save-tree`) stored in
the config directory under a name, so that several projects can reference it
with `layout = "<name>"`. Its contents are never interpreted.
"""

from pathlib import Path
from typing import TYPE_CHECKING

from ..errors import PathDoesntExist
from .configfile import ConfigFile, ConfigStore

if TYPE_CHECKING:
    from .context import ConfigContext


LAYOUTS_PREFIX = "layouts"
LAYOUTS_SUFFIX = ".json"


class Layout(ConfigFile):
    """Handle for a managed layout file."""

    kind = "layout"

    def read(self) -> str:
        return self.path.read_text(encoding="utf-8")

    def verify(self) -> None:
        if not self.path.is_file():
            raise PathDoesntExist(str(self.path))


class LayoutStore(ConfigStore[Layout]):
    """Store for managed layouts (`<config-dir>/layouts/*.json`)."""

    def __init__(
        self,
        context: "ConfigContext",
        prefix: str = LAYOUTS_PREFIX,
        suffix: str = LAYOUTS_SUFFIX,
    ):
        super().__init__(context, prefix, suffix)

    def _handle(self, name: str, path: Path) -> Layout:
        return Layout(self, name, path)
