"""Rich formatters for i3start CLI output."""

from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..core.configfile import ConfigFile
from ..core.starter import StartReport
from ..models.config import LayoutContents, LayoutPath, ManagedLayoutRef, ProjectConfig


# Global console instance
console = Console()


def format_config_list(kind: str, names: List[str]) -> Table:
    """Format the names of one category as a Rich table."""
    table = Table(title=f"{kind.capitalize()}s", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="bold green")
    for name in names:
        table.add_row(escape(name))
    return table


def describe_layout(config: ProjectConfig) -> str:
    layout = config.general.layout
    if isinstance(layout, LayoutContents):
        return "inline contents"
    if isinstance(layout, ManagedLayoutRef):
        return f"managed layout '{escape(layout.name)}'"
    if isinstance(layout, LayoutPath):
        return f"file {escape(str(layout.path))}"
    return "[dim]unknown[/dim]"


def format_config_details(
    config_file: ConfigFile,
    config: Optional[ProjectConfig] = None,
    error: Optional[Exception] = None,
) -> Panel:
    """Format information about a project or layout as a Rich panel.

    Args:
        config_file: Project or layout handle
        config: Parsed project configuration, if it could be loaded
        error: Why loading the configuration failed
    """
    lines = [
        f"[bold cyan]Name:[/bold cyan] {escape(config_file.name)}",
        f"[bold cyan]Path:[/bold cyan] {escape(str(config_file.path))}",
    ]

    if config is not None:
        general = config.general
        lines.append(f"[bold cyan]Layout:[/bold cyan] {describe_layout(config)}")
        if general.workspace is not None:
            lines.append(f"[bold cyan]Workspace:[/bold cyan] {escape(general.workspace)}")
        if general.working_directory is not None:
            lines.append(
                f"[bold cyan]Working Directory:[/bold cyan] {escape(str(general.working_directory))}"
            )

        lines.append("")
        lines.append(f"[bold cyan]Applications ({len(config.applications)}):[/bold cyan]")
        for application in config.applications:
            line = f"  • {escape(str(application.command))}"
            if application.exec is not None:
                line += f" [dim]({application.exec.exec_type.value}, {len(application.exec.commands)} input(s))[/dim]"
            lines.append(line)

    if error is not None:
        lines.append("")
        lines.append(f"[bold red]Invalid:[/bold red] {escape(str(error))}")

    content = "\n".join(lines)
    return Panel(content, title=f"{config_file.kind.capitalize()}: {escape(config_file.name)}", border_style="cyan")


def format_start_report(report: StartReport) -> Table:
    """Format the applications started for a project as a Rich table."""
    title = f"Started '{escape(report.project)}'"
    if report.workspace is not None:
        title += f" on workspace {escape(report.workspace)}"

    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Command", style="bold green")
    table.add_column("Directory", style="blue")
    table.add_column("PID", justify="right", style="yellow")
    table.add_column("Input", style="white")

    for outcome in report.outcomes:
        if outcome.input_error is not None:
            input_status = "[red]failed[/red]"
        else:
            input_status = "[green]ok[/green]"
        table.add_row(
            str(outcome.index),
            escape(" ".join(outcome.argv)),
            escape(str(outcome.cwd or Path("."))),
            str(outcome.pid) if outcome.pid is not None else "-",
            input_status,
        )

    return table
