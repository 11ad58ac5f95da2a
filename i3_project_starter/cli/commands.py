"""CLI command handlers for i3start.

Implements the project commands (`new`, `edit`, `start`, ...) and the
`layout` command group for managed layouts. Both categories share the
create/copy/rename/delete/edit handlers; which store they act on is taken
from the parsed arguments.
"""

import argparse
import asyncio
import logging
import sys
from importlib import resources
from pathlib import Path
from typing import List, Optional

import argcomplete

from .. import __version__
from ..core.configfile import ConfigFile, ConfigStore
from ..core.context import ConfigContext
from ..core.editor import open_editor
from ..core.i3_client import I3Client
from ..core.project import Project
from ..core.starter import ProjectStarter
from ..errors import ApplicationSpawnFailed, EditorNotFound, I3StartError, UnknownConfig
from .completers import complete_layout_names, complete_project_names
from .formatters import console, format_config_details, format_config_list, format_start_report
from .logging_config import get_global_logger, init_logging, log_timing
from .output import (
    print_error,
    print_error_with_remediation,
    print_info,
    print_success,
    print_warning,
)
from .verify_loop import verify_with_retry


logger = logging.getLogger("i3start.cli")

DEFAULT_LOCAL_FILE = "i3start.toml"

TEMPLATES = {
    "project": "project_template.toml",
    "layout": "layout_template.json",
}


# ============================================================================
# Helpers
# ============================================================================


def load_template(kind: str) -> bytes:
    """Bundled template for new projects or layouts."""
    return (resources.files("i3_project_starter") / "resources" / TEMPLATES[kind]).read_bytes()


def get_context(args: argparse.Namespace) -> ConfigContext:
    config_dir = getattr(args, "config_dir", None)
    return ConfigContext.default(Path(config_dir) if config_dir else None)


def get_store(args: argparse.Namespace) -> ConfigStore:
    """Store the command acts on: layouts for `layout ...`, projects otherwise."""
    context = get_context(args)
    if args.kind == "layout":
        return context.layouts
    return context.projects


def report_error(args: argparse.Namespace, error: Exception) -> int:
    """Print an error the way all commands do and return the exit code."""
    if isinstance(error, UnknownConfig):
        list_cmd = "i3start layout list" if args.kind == "layout" else "i3start list"
        print_error_with_remediation(str(error), f"Use '{list_cmd}' to see existing {args.kind}s")
    elif isinstance(error, EditorNotFound):
        print_error_with_remediation(str(error), "Set $VISUAL or $EDITOR, e.g. EDITOR=vim")
    else:
        print_error(str(error))
    logger.debug(f"Command failed: {error!r}")
    return 1


def edit_and_verify(entity: ConfigFile, edit: bool = True, verify: bool = True) -> None:
    """Open `entity` in the editor, then verify it interactively."""
    if edit:
        open_editor(entity.path)
    if verify:
        verify_with_retry(entity, lambda: open_editor(entity.path))


# ============================================================================
# Commands shared by projects and layouts
# ============================================================================


async def cmd_new(args: argparse.Namespace) -> int:
    """Create a configuration from a template and open it in the editor.

    Args:
        args: Parsed arguments with 'name', 'no_edit', 'no_verify' and, for
            layouts, 'template'

    Returns:
        0 on success, 1 on error
    """
    try:
        store = get_store(args)
        template_path = getattr(args, "template", None)
        if template_path == "-":
            template = sys.stdin.buffer.read()
        elif template_path:
            template = Path(template_path).expanduser().read_bytes()
        else:
            template = load_template(args.kind)

        entity = store.create_from_template(args.name, template)
        print_success(f"Created {args.kind} '{entity.name}' at {entity.path}")

        if not args.no_edit:
            edit_and_verify(entity, verify=not args.no_verify)
        return 0

    except (I3StartError, OSError, EOFError) as e:
        return report_error(args, e)


async def cmd_copy(args: argparse.Namespace) -> int:
    """Copy an existing configuration to a new name."""
    try:
        store = get_store(args)
        new = store.open(args.existing).copy(args.new)
        print_success(f"Copied {args.kind} '{args.existing}' to '{new.name}'")

        if not args.no_edit:
            edit_and_verify(new, verify=not args.no_verify)
        return 0

    except (I3StartError, OSError, EOFError) as e:
        return report_error(args, e)


async def cmd_delete(args: argparse.Namespace) -> int:
    """Delete one or more configurations, stopping at the first failure."""
    try:
        store = get_store(args)
        for name in args.names:
            store.open(name).delete()
            print_success(f"Deleted {args.kind} '{name}'")
        return 0

    except (I3StartError, OSError) as e:
        return report_error(args, e)


async def cmd_edit(args: argparse.Namespace) -> int:
    """Open a configuration in the editor and verify it afterwards."""
    try:
        entity = get_store(args).open(args.name)
        edit_and_verify(entity, verify=not args.no_verify)
        return 0

    except (I3StartError, OSError, EOFError) as e:
        return report_error(args, e)


async def cmd_info(args: argparse.Namespace) -> int:
    """Show where a configuration lives and, for projects, what it starts."""
    try:
        entity = get_store(args).open(args.name)

        config = None
        error = None
        if isinstance(entity, Project):
            try:
                config = entity.load()
            except I3StartError as e:
                error = e

        console.print(format_config_details(entity, config=config, error=error))
        return 0

    except (I3StartError, OSError) as e:
        return report_error(args, e)


async def cmd_list(args: argparse.Namespace) -> int:
    """List configuration names, one per line with -q."""
    try:
        names = get_store(args).list()

        if args.quiet:
            for name in names:
                print(name)
            return 0

        if not names:
            new_cmd = "i3start layout new" if args.kind == "layout" else "i3start new"
            print_info(f"No {args.kind}s exist yet. Create one with '{new_cmd} <name>'")
            return 0

        console.print(format_config_list(args.kind, names))
        return 0

    except (I3StartError, OSError) as e:
        return report_error(args, e)


async def cmd_rename(args: argparse.Namespace) -> int:
    """Rename a configuration, optionally editing it afterwards."""
    try:
        store = get_store(args)
        renamed = store.open(args.current).rename(args.new)
        print_success(f"Renamed {args.kind} '{args.current}' to '{renamed.name}'")

        if args.edit:
            edit_and_verify(renamed, verify=not args.no_verify)
        return 0

    except (I3StartError, OSError, EOFError) as e:
        return report_error(args, e)


# ============================================================================
# Project-only commands
# ============================================================================


async def start_project(args: argparse.Namespace, project: Project) -> int:
    """Start `project` with the -d/-w overrides from `args`."""
    working_directory = None
    if args.working_directory:
        working_directory = Path(args.working_directory).expanduser()

    # Parse before talking to i3 so that broken configs never touch the session
    project.config()

    try:
        async with I3Client() as i3:
            starter = ProjectStarter(i3)
            with log_timing(f"Start project '{project.name}'", logger):
                report = await starter.start(
                    project,
                    working_directory=working_directory,
                    workspace=args.workspace,
                )
    except ApplicationSpawnFailed as e:
        print_error(str(e))
        started = len(e.report.outcomes)
        if started:
            print_warning(f"{started} application(s) were already started and keep running")
        return 1

    for outcome in report.input_failures:
        print_warning(f"Input into '{' '.join(outcome.argv)}' failed: {outcome.input_error}")

    if logger.isEnabledFor(logging.INFO):
        console.print(format_start_report(report))
    print_success(f"Started project '{project.name}' ({len(report.outcomes)} application(s))")
    return 0


async def cmd_start(args: argparse.Namespace) -> int:
    """Start a managed project."""
    try:
        project = get_store(args).open(args.name)
        return await start_project(args, project)

    except (I3StartError, OSError) as e:
        return report_error(args, e)


async def cmd_local(args: argparse.Namespace) -> int:
    """Start the project file in the current directory (or -f FILE)."""
    try:
        project = get_store(args).from_path(Path(args.file).expanduser())
        return await start_project(args, project)

    except (I3StartError, OSError) as e:
        return report_error(args, e)


async def cmd_verify(args: argparse.Namespace) -> int:
    """Verify the named projects, or all of them.

    Returns:
        0 if every project verified, 1 otherwise
    """
    try:
        store = get_store(args)
        names = args.names or store.list()
    except (I3StartError, OSError) as e:
        return report_error(args, e)

    if not names:
        print_info("No projects exist yet")
        return 0

    failures = 0
    for name in names:
        try:
            store.open(name).verify()
        except (I3StartError, OSError) as e:
            failures += 1
            print_error(f"{name}: {e}")
        else:
            print_success(f"{name}: valid")

    return 1 if failures else 0


# ============================================================================
# Argument parsing
# ============================================================================


def add_config_commands(subparsers, kind: str, completer) -> None:
    """Add the commands shared by projects and layouts to `subparsers`."""

    # new
    parser_new = subparsers.add_parser(
        "new",
        help=f"Create a new {kind} and open it in your editor",
    )
    parser_new.add_argument("name", help=f"Name of the {kind}")
    parser_new.add_argument("--no-edit", action="store_true", help="Don't open the editor")
    parser_new.add_argument("--no-verify", action="store_true", help="Don't verify after editing")
    if kind == "layout":
        parser_new.add_argument(
            "-t", "--template",
            help="Create the layout from this file instead of the template ('-' reads stdin)",
        )
    parser_new.set_defaults(handler=cmd_new)

    # copy
    parser_copy = subparsers.add_parser("copy", help=f"Copy an existing {kind}")
    parser_copy.add_argument("existing", help=f"Name of the {kind} to copy").completer = completer
    parser_copy.add_argument("new", help=f"Name of the new {kind}")
    parser_copy.add_argument("--no-edit", action="store_true", help="Don't open the editor")
    parser_copy.add_argument("--no-verify", action="store_true", help="Don't verify after editing")
    parser_copy.set_defaults(handler=cmd_copy)

    # delete
    parser_delete = subparsers.add_parser("delete", aliases=["remove"], help=f"Delete {kind}s")
    parser_delete.add_argument("names", nargs="+", metavar="NAME", help=f"{kind.capitalize()}s to delete").completer = completer
    parser_delete.set_defaults(handler=cmd_delete)

    # edit
    parser_edit = subparsers.add_parser("edit", aliases=["open"], help=f"Open a {kind} in your editor")
    parser_edit.add_argument("name", help=f"Name of the {kind}").completer = completer
    parser_edit.add_argument("--no-verify", action="store_true", help="Don't verify after editing")
    parser_edit.set_defaults(handler=cmd_edit)

    # info
    parser_info = subparsers.add_parser("info", help=f"Show information about a {kind}")
    parser_info.add_argument("name", help=f"Name of the {kind}").completer = completer
    parser_info.set_defaults(handler=cmd_info)

    # list
    parser_list = subparsers.add_parser("list", help=f"List all {kind}s")
    parser_list.add_argument("-q", "--quiet", action="store_true", help="Print names only, one per line")
    parser_list.set_defaults(handler=cmd_list)

    # rename
    parser_rename = subparsers.add_parser("rename", help=f"Rename a {kind}")
    parser_rename.add_argument("current", help=f"Current name of the {kind}").completer = completer
    parser_rename.add_argument("new", help=f"New name of the {kind}")
    parser_rename.add_argument("--edit", action="store_true", help="Open the editor after renaming")
    parser_rename.add_argument("--no-verify", action="store_true", help="Don't verify after editing")
    parser_rename.set_defaults(handler=cmd_rename)


def add_start_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-d", "--working-directory",
        help="Directory to start all applications in (overrides the configuration)",
    )
    parser.add_argument(
        "-w", "--workspace",
        help="Workspace to apply the layout to (overrides the configuration)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="i3start",
        description="i3start - start i3 projects from saved layouts and application lists",
    )

    parser.add_argument("--version", action="version", version=f"i3start {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging (INFO level)")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (DEBUG level, includes verbose)",
    )
    parser.add_argument(
        "--config-dir",
        help="Configuration directory (default: $I3START_CONFIG_DIR or $XDG_CONFIG_HOME/i3start)",
    )
    parser.set_defaults(kind="project")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    add_config_commands(subparsers, "project", complete_project_names)

    # start
    parser_start = subparsers.add_parser("start", aliases=["run"], help="Start a project")
    parser_start.add_argument("name", help="Name of the project").completer = complete_project_names
    add_start_arguments(parser_start)
    parser_start.set_defaults(handler=cmd_start)

    # local
    parser_local = subparsers.add_parser("local", help="Start a project from a file outside the config directory")
    parser_local.add_argument(
        "-f", "--file",
        default=DEFAULT_LOCAL_FILE,
        help=f"Project file to start (default: {DEFAULT_LOCAL_FILE})",
    )
    add_start_arguments(parser_local)
    parser_local.set_defaults(handler=cmd_local)

    # verify
    parser_verify = subparsers.add_parser("verify", help="Verify projects (all when no name is given)")
    parser_verify.add_argument("names", nargs="*", metavar="NAME", help="Projects to verify").completer = complete_project_names
    parser_verify.set_defaults(handler=cmd_verify)

    # layout <subcommand>
    parser_layout = subparsers.add_parser("layout", help="Manage layouts shared between projects")
    parser_layout.set_defaults(kind="layout", layout_parser=parser_layout)
    layout_subparsers = parser_layout.add_subparsers(dest="layout_command", help="Subcommand")
    add_config_commands(layout_subparsers, "layout", complete_layout_names)

    return parser


def cli_main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    argcomplete.autocomplete(parser)

    args = parser.parse_args(argv)

    verbose = getattr(args, "verbose", False)
    debug = getattr(args, "debug", False)
    init_logging(verbose=verbose, debug=debug)

    global_logger = get_global_logger()
    if debug:
        global_logger.debug("Debug logging enabled")
    elif verbose:
        global_logger.info("Verbose logging enabled")

    # No command = show help
    if not args.command:
        parser.print_help()
        return 0

    handler = getattr(args, "handler", None)
    if handler is None:
        # `i3start layout` without a subcommand
        args.layout_parser.print_help()
        return 0

    return asyncio.run(handler(args))


if __name__ == "__main__":
    sys.exit(cli_main())
