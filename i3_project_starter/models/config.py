"""
Project Configuration Data Models

Storage: <config-dir>/projects/<name>.toml

The TOML document has a `[general]` table and an array of `[[applications]]`
tables. Unknown keys are rejected everywhere, so that typos are reported
instead of silently ignored.

Example:

    [general]
    working_directory = "~/development/myproject"
    workspace = "1"
    layout = "mylayout"

    [[applications]]
    command = "termite --role split-left"
    exec = ["echo Hello", "echo World"]

    [[applications]]
    command = ["termite", "--role", "split-right"]
    exec = { commands = ["ctrl+r", "Return"], exec_type = "keys", timeout = 2 }
"""

import shlex
import tomllib
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any, List, Literal, Optional, Union

import tomlkit
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from ..errors import CommandSplittingFailed, ConfigParseError, LayoutNotSpecified

if TYPE_CHECKING:
    from ..core.layouts import LayoutStore


class LayoutContents(BaseModel):
    """Layout given inline, as the JSON `i3-save-tree` produces."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["contents"] = "contents"
    contents: str

    def to_toml_value(self) -> str:
        return self.contents


class ManagedLayoutRef(BaseModel):
    """Reference by name to a layout managed with `i3start layout`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["managed"] = "managed"
    name: str = Field(..., min_length=1)

    def to_toml_value(self) -> str:
        return self.name


class LayoutPath(BaseModel):
    """Layout stored in a file outside of the config directory."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["path"] = "path"
    path: Path

    @field_validator("path")
    @classmethod
    def expand_home(cls, v: Path) -> Path:
        return v.expanduser()

    def to_toml_value(self) -> str:
        return str(self.path)


LayoutSource = Annotated[
    Union[LayoutContents, ManagedLayoutRef, LayoutPath],
    Field(discriminator="kind"),
]


def classify_layout(
    value: str, layouts: Optional["LayoutStore"] = None
) -> Union[LayoutContents, ManagedLayoutRef, LayoutPath]:
    """Decide which kind of layout a `general.layout` string describes.

    Precedence:
    1. Anything containing `{` is inline layout contents
    2. A name of an existing managed layout is a managed reference
    3. Everything else is a filesystem path (`~` is expanded)

    Args:
        value: Raw `layout` string from the configuration
        layouts: Managed layout store used for name lookups (None disables
            managed references)

    Returns:
        LayoutContents, ManagedLayoutRef or LayoutPath

    Raises:
        LayoutNotSpecified: If the string is empty
    """
    if not value.strip():
        raise LayoutNotSpecified()

    if "{" in value:
        return LayoutContents(contents=value)

    if layouts is not None and layouts.exists(value):
        return ManagedLayoutRef(name=value)

    return LayoutPath(path=Path(value))


def _tokens_to_command(tokens: List[Any]) -> dict:
    if not tokens:
        raise ValueError("command can not be empty")
    return {"program": tokens[0], "args": tokens[1:]}


class ApplicationCommand(BaseModel):
    """Program and arguments used to start an application.

    Accepts a shell-like string (split honoring single and double quotes),
    a list `[program, *args]`, or a table `{ program = ..., args = [...] }`.
    The following are equivalent:

        command = "myprogram --with 'multiple args'"
        command = ["myprogram", "--with", "multiple args"]
        command = { program = "myprogram", args = ["--with", "multiple args"] }
    """

    model_config = ConfigDict(extra="forbid")

    program: str = Field(..., min_length=1, description="Executable to start")
    args: List[str] = Field(default_factory=list, description="Arguments, passed verbatim")

    @model_validator(mode="before")
    @classmethod
    def from_string_or_list(cls, data: Any) -> Any:
        if isinstance(data, str):
            try:
                tokens = shlex.split(data)
            except ValueError:
                raise CommandSplittingFailed(data)
            return _tokens_to_command(tokens)
        if isinstance(data, (list, tuple)):
            return _tokens_to_command(list(data))
        return data

    @property
    def argv(self) -> List[str]:
        return [self.program, *self.args]

    def __str__(self) -> str:
        return shlex.join(self.argv)


class ExecType(str, Enum):
    """How `Exec.commands` are sent to the application window."""

    TEXT = "text"                      # Type each command, then press Return
    TEXT_NO_RETURN = "text_no_return"  # Type each command
    KEYS = "keys"                      # Send all commands as key names


class Exec(BaseModel):
    """Input to send into an application after it started.

    Accepts a single string, a list of strings, or a table with `commands`,
    `exec_type` and `timeout` (seconds).
    """

    model_config = ConfigDict(extra="forbid")

    commands: List[str] = Field(..., min_length=1)
    exec_type: ExecType = ExecType.TEXT
    timeout: timedelta = Field(default=timedelta(seconds=5))

    @model_validator(mode="before")
    @classmethod
    def from_string_or_list(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"commands": [data]}
        if isinstance(data, (list, tuple)):
            return {"commands": list(data)}
        return data

    @field_validator("timeout", mode="before")
    @classmethod
    def timeout_from_seconds(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("timeout must be a number of seconds")
        if isinstance(v, (int, float)):
            return timedelta(seconds=v)
        return v

    @field_validator("timeout")
    @classmethod
    def timeout_positive(cls, v: timedelta) -> timedelta:
        if v <= timedelta(0):
            raise ValueError("timeout must be positive")
        return v

    @property
    def timeout_seconds(self) -> float:
        return self.timeout.total_seconds()


class Application(BaseModel):
    """An application to start as part of a project."""

    model_config = ConfigDict(extra="forbid")

    command: ApplicationCommand
    working_directory: Optional[Path] = Field(
        default=None, description="Overrides general.working_directory"
    )
    exec: Optional[Exec] = None

    @field_validator("working_directory")
    @classmethod
    def expand_home(cls, v: Optional[Path]) -> Optional[Path]:
        return v.expanduser() if v is not None else v


class General(BaseModel):
    """The `[general]` section of a project."""

    model_config = ConfigDict(extra="forbid")

    working_directory: Optional[Path] = None
    workspace: Optional[str] = Field(
        default=None, description="Workspace to append the layout to (focused one if unset)"
    )
    layout: LayoutSource

    @field_validator("working_directory")
    @classmethod
    def expand_home(cls, v: Optional[Path]) -> Optional[Path]:
        return v.expanduser() if v is not None else v

    @field_validator("workspace", mode="before")
    @classmethod
    def workspace_number_to_name(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("layout", mode="before")
    @classmethod
    def classify_layout_string(cls, v: Any, info: ValidationInfo) -> Any:
        """Turn the raw `layout` string into one of the layout kinds.

        The managed layout store comes from the validation context
        (`{"layouts": LayoutStore}`).
        """
        if isinstance(v, str):
            layouts = info.context.get("layouts") if info.context else None
            return classify_layout(v, layouts).model_dump()
        return v


class ProjectConfig(BaseModel):
    """Complete project configuration: general section plus applications.

    Applications are kept in document order, which is also launch order.
    """

    model_config = ConfigDict(extra="forbid")

    general: General
    applications: List[Application]

    @classmethod
    def from_toml(
        cls,
        text: str,
        layouts: Optional["LayoutStore"] = None,
        path: Optional[Path] = None,
    ) -> "ProjectConfig":
        """Parse and validate a project document.

        Args:
            text: TOML document
            layouts: Managed layout store for resolving layout names
            path: Source file, used in error messages only

        Returns:
            Validated ProjectConfig

        Raises:
            ConfigParseError: Invalid TOML or schema violation
            LayoutNotSpecified: `general.layout` is empty
        """
        source = str(path) if path is not None else None
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise ConfigParseError(source, str(e)) from e

        try:
            return cls.model_validate(data, context={"layouts": layouts})
        except ValidationError as e:
            raise ConfigParseError(source, format_validation_error(e)) from e

    def to_toml(self) -> str:
        """Serialize to a TOML document that `from_toml` parses back to an equal model."""
        doc = tomlkit.document()

        # Must precede [general], a bare key after a table header belongs to that table
        if not self.applications:
            doc.add("applications", tomlkit.array())

        general = tomlkit.table()
        if self.general.working_directory is not None:
            general.add("working_directory", str(self.general.working_directory))
        if self.general.workspace is not None:
            general.add("workspace", self.general.workspace)
        general.add("layout", self.general.layout.to_toml_value())
        doc.add("general", general)

        if self.applications:
            applications = tomlkit.aot()
            for application in self.applications:
                table = tomlkit.table()
                table.add("command", application.command.argv)
                if application.working_directory is not None:
                    table.add("working_directory", str(application.working_directory))
                if application.exec is not None:
                    exec_table = tomlkit.inline_table()
                    exec_table.update({
                        "commands": list(application.exec.commands),
                        "exec_type": application.exec.exec_type.value,
                        "timeout": _seconds(application.exec.timeout),
                    })
                    table.add("exec", exec_table)
                applications.append(table)
            doc.add("applications", applications)

        return tomlkit.dumps(doc)


def _seconds(value: timedelta) -> Union[int, float]:
    seconds = value.total_seconds()
    return int(seconds) if seconds.is_integer() else seconds


def format_validation_error(error: ValidationError) -> str:
    """Format a pydantic ValidationError as `loc: message` pairs."""
    parts = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"])
        if location:
            parts.append(f"{location}: {err['msg']}")
        else:
            parts.append(err["msg"])
    return "; ".join(parts)
