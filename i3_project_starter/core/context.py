"""Base directory context for i3start configurations.

A ConfigContext is created once at program start and handed to everything
that reads or writes configuration files. Tests construct one on a temporary
directory.
"""

import os
from functools import cached_property
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from xdg import BaseDirectory

if TYPE_CHECKING:
    from .layouts import LayoutStore
    from .project import ProjectStore


APP_NAME = "i3start"
CONFIG_DIR_ENV = "I3START_CONFIG_DIR"


class ConfigContext:
    """Holds the configuration base directory and the per-category stores.

    Layout on disk:
        <base_dir>/projects/<name>.toml
        <base_dir>/layouts/<name>.json
    """

    def __init__(self, base_dir: Path):
        """Initialize context.

        Args:
            base_dir: Configuration base directory (created lazily)
        """
        self.base_dir = Path(base_dir).expanduser()

    @classmethod
    def default(cls, config_dir: Optional[Path] = None) -> "ConfigContext":
        """Build the context used by the CLI.

        Precedence: explicit `config_dir` > $I3START_CONFIG_DIR >
        $XDG_CONFIG_HOME/i3start.
        """
        if config_dir is None:
            env_dir = os.environ.get(CONFIG_DIR_ENV)
            if env_dir:
                config_dir = Path(env_dir)
            else:
                config_dir = Path(BaseDirectory.xdg_config_home) / APP_NAME
        return cls(config_dir)

    @cached_property
    def projects(self) -> "ProjectStore":
        from .project import ProjectStore
        return ProjectStore(self)

    @cached_property
    def layouts(self) -> "LayoutStore":
        from .layouts import LayoutStore
        return LayoutStore(self)

    def __repr__(self) -> str:
        return f"ConfigContext(base_dir={str(self.base_dir)!r})"
