"""Project configuration files.

This module provides the Project handle:
- Lazy, cached parsing of the project TOML file
- Verification of all paths a project references

Starting a project is implemented in `core.starter`.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

from ..errors import ConfigParseError, PathDoesntExist
from ..models.config import LayoutPath, ManagedLayoutRef, ProjectConfig
from .configfile import ConfigFile, ConfigStore

if TYPE_CHECKING:
    from .context import ConfigContext


logger = logging.getLogger("i3start.project")

PROJECTS_PREFIX = "projects"
PROJECTS_SUFFIX = ".toml"


class Project(ConfigFile):
    """Handle for a project configuration.

    The parsed configuration is cached for the lifetime of the handle;
    re-open the project to see changes made to the file afterwards.
    """

    kind = "project"

    def __init__(self, store: "ProjectStore", name: str, path: Path):
        super().__init__(store, name, path)
        self._config: Optional[ProjectConfig] = None

    @property
    def context(self) -> "ConfigContext":
        return self.store.context

    def load(self) -> ProjectConfig:
        """Parse the configuration file without caching it.

        Raises:
            ConfigParseError: If the file is not valid UTF-8, TOML or schema
            OSError: If the file cannot be read
        """
        try:
            text = self.path.read_bytes().decode("utf-8")
        except UnicodeDecodeError as e:
            raise ConfigParseError(str(self.path), str(e)) from e

        return ProjectConfig.from_toml(text, layouts=self.context.layouts, path=self.path)

    def config(self) -> ProjectConfig:
        """Get the project's configuration, parsing it on first access."""
        if self._config is None:
            logger.debug(f"Loading project config: {self.path}")
            self._config = self.load()
        return self._config

    def referenced_paths(self, config: ProjectConfig) -> List[Path]:
        """All filesystem paths the configuration depends on, in document order."""
        paths: List[Path] = []
        if config.general.working_directory is not None:
            paths.append(config.general.working_directory)
        if isinstance(config.general.layout, LayoutPath):
            paths.append(config.general.layout.path)
        for application in config.applications:
            if application.working_directory is not None:
                paths.append(application.working_directory)
        return paths

    def verify(self) -> None:
        """Parse the file and check that everything it references exists.

        Always re-reads the file; the cached configuration is not touched.

        Raises:
            ConfigParseError: If parsing fails
            UnknownConfig: If a referenced managed layout doesn't exist
            PathDoesntExist: If a referenced path doesn't exist
        """
        config = self.load()

        layout = config.general.layout
        if isinstance(layout, ManagedLayoutRef):
            self.context.layouts.open(layout.name)

        for path in self.referenced_paths(config):
            if not path.exists():
                raise PathDoesntExist(str(path))


class ProjectStore(ConfigStore[Project]):
    """Store for projects (`<config-dir>/projects/*.toml`)."""

    def __init__(
        self,
        context: "ConfigContext",
        prefix: str = PROJECTS_PREFIX,
        suffix: str = PROJECTS_SUFFIX,
    ):
        super().__init__(context, prefix, suffix)

    def _handle(self, name: str, path: Path) -> Project:
        return Project(self, name, path)
