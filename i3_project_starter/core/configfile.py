"""Named configuration files shared by projects and layouts.

A ConfigStore manages one category (`projects`, `layouts`) of files below the
context's base directory. It hands out ConfigFile handles, which carry the
stable name and path of one file.
"""

import logging
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Generic, List, TypeVar

from ..errors import ConfigExists, InvalidConfigName, PathDoesntExist, UnknownConfig

if TYPE_CHECKING:
    from .context import ConfigContext


logger = logging.getLogger("i3start.configfile")

LOCAL_NAME = "local"

H = TypeVar("H", bound="ConfigFile")


def is_valid_name(name: str) -> bool:
    """Check that a name maps to exactly one file inside the category directory."""
    return bool(name) and name not in (".", "..") and "/" not in name and "\0" not in name


class ConfigStore(ABC, Generic[H]):
    """Create, open and list the configuration files of one category.

    Args:
        context: Context providing the base directory
        prefix: Category directory below the base directory
        suffix: File extension, including the dot
    """

    def __init__(self, context: "ConfigContext", prefix: str, suffix: str):
        self.context = context
        self.prefix = prefix
        self.suffix = suffix

    @property
    def directory(self) -> Path:
        return self.context.base_dir / self.prefix

    def config_path(self, name: str) -> Path:
        """Path a configuration with this name lives at."""
        if not is_valid_name(name):
            raise InvalidConfigName(name)
        return self.directory / f"{name}{self.suffix}"

    @abstractmethod
    def _handle(self, name: str, path: Path) -> H:
        """Build the handle type of this category."""

    def exists(self, name: str) -> bool:
        if not is_valid_name(name):
            return False
        return self.config_path(name).is_file()

    def create(self, name: str) -> H:
        """Reserve a new configuration.

        Creates the category directory but not the file itself.

        Raises:
            ConfigExists: If a configuration with this name exists
            InvalidConfigName: If the name cannot be used as a file name
        """
        path = self.config_path(name)
        if path.exists():
            raise ConfigExists(self.prefix, name)

        self.directory.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Reserved {self.prefix} config '{name}' at {path}")
        return self._handle(name, path)

    def create_from_template(self, name: str, template: bytes) -> H:
        """Create a new configuration and write the template into it."""
        handle = self.create(name)
        with handle.path.open("wb") as f:
            f.write(template)
            f.flush()
        logger.info(f"Created {self.prefix} config '{name}' from template")
        return handle

    def open(self, name: str) -> H:
        """Open an existing configuration.

        Raises:
            UnknownConfig: If no file exists for this name
        """
        if not self.exists(name):
            raise UnknownConfig(self.prefix, name)
        return self._handle(name, self.config_path(name))

    def from_path(self, path: Path) -> H:
        """Wrap an arbitrary file, e.g. for `i3start local`.

        Raises:
            PathDoesntExist: If the path is not an existing regular file
        """
        path = Path(path)
        if not path.is_file():
            raise PathDoesntExist(str(path))
        return self._handle(LOCAL_NAME, path)

    def list(self) -> List[str]:
        """Names of all configurations in this category, sorted."""
        if not self.directory.is_dir():
            return []
        return sorted(
            entry.name[: -len(self.suffix)]
            for entry in self.directory.iterdir()
            if entry.is_file() and entry.name.endswith(self.suffix) and len(entry.name) > len(self.suffix)
        )


class ConfigFile(ABC):
    """Handle for one named configuration file."""

    kind = "config"

    def __init__(self, store: ConfigStore, name: str, path: Path):
        self.store = store
        self.name = name
        self.path = path

    @property
    def prefix(self) -> str:
        return self.store.prefix

    def copy(self: H, new_name: str) -> H:
        """Copy this configuration to a new name in the same category."""
        new = self.store.create(new_name)
        shutil.copyfile(self.path, new.path)
        logger.info(f"Copied {self.prefix} config '{self.name}' to '{new_name}'")
        return new

    def rename(self: H, new_name: str) -> H:
        """Rename this configuration; the current handle becomes stale."""
        new = self.store.create(new_name)
        self.path.rename(new.path)
        logger.info(f"Renamed {self.prefix} config '{self.name}' to '{new_name}'")
        return new

    def delete(self) -> None:
        self.path.unlink()
        logger.info(f"Deleted {self.prefix} config '{self.name}'")

    @abstractmethod
    def verify(self) -> None:
        """Check that the configuration is usable.

        Raises:
            I3StartError: Describing the first problem found
        """

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigFile):
            return NotImplemented
        return type(self) is type(other) and self.name == other.name and self.path == other.path

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.name, self.path))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, path={str(self.path)!r})"
