"""Error types for i3start.

Every error the CLI reports to the user derives from I3StartError. Errors
from the standard library (OSError for file and process failures) are not
wrapped and propagate unchanged.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .core.starter import StartReport


class I3StartError(Exception):
    """Base class for all i3start errors."""

    pass


class ConfigExists(I3StartError):
    """A configuration with this name already exists in the category."""

    def __init__(self, prefix: str, name: str):
        self.prefix = prefix
        self.name = name
        super().__init__(f"configuration already exists: '{prefix}/{name}'")


class UnknownConfig(I3StartError):
    """No configuration with this name exists in the category."""

    def __init__(self, prefix: str, name: str):
        self.prefix = prefix
        self.name = name
        super().__init__(f"configuration is unknown: '{prefix}/{name}'")


class PathDoesntExist(I3StartError):
    """A referenced path does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"path doesn't exist: '{path}'")


class InvalidUtf8Path(I3StartError):
    """A path cannot be represented as UTF-8 for an i3 command."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"path is invalid UTF8: '{path}'")


class LayoutNotSpecified(I3StartError):
    """The general section has an empty layout."""

    def __init__(self):
        super().__init__("layout not specified: `general.layout` is empty")


class CommandSplittingFailed(I3StartError, ValueError):
    """A command string could not be split into program and arguments.

    Also a ValueError, so that pydantic reports it as a validation error of
    the field it occurred in.
    """

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"command splitting failed: '{command}'")


class EditorNotFound(I3StartError):
    """Neither $VISUAL nor $EDITOR is set."""

    def __init__(self):
        super().__init__("cannot find an editor. Please specify $VISUAL or $EDITOR")


class TextOrKeyInputFailed(I3StartError):
    """The input tool did not finish within its timeout (or could not run)."""

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        message = "text or key input failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ConfigParseError(I3StartError):
    """A configuration file is not valid TOML or does not match the schema."""

    def __init__(self, path: Optional[str], detail: str):
        self.path = path
        self.detail = detail
        if path:
            super().__init__(f"invalid configuration '{path}': {detail}")
        else:
            super().__init__(f"invalid configuration: {detail}")


class ApplicationSpawnFailed(I3StartError):
    """An application could not be started.

    Applications started before the failing one keep running; the report
    lists them.
    """

    def __init__(self, argv: list, error: OSError, report: "StartReport"):
        self.argv = argv
        self.error = error
        self.report = report
        super().__init__(f"failed to start '{' '.join(argv)}': {error}")


class InvalidConfigName(I3StartError):
    """A configuration name cannot be used as a file name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"invalid configuration name: '{name}'")
