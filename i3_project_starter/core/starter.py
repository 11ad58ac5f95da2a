"""Start a project.

Starting a project:
1. appends the configured layout to the target workspace,
2. starts the configured applications in order,
3. sends text or keys into each application that has an `exec` entry.

Applications run detached from i3start (stdio redirected to /dev/null) and
are not monitored afterwards. When an application fails to start, the ones
before it keep running.
"""

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..errors import ApplicationSpawnFailed, TextOrKeyInputFailed
from ..models.config import Application, General
from .i3_client import I3Client
from .input_driver import InputDriver
from .layout_resolver import resolve_layout
from .project import Project


logger = logging.getLogger("i3start.starter")


@dataclass
class ApplicationOutcome:
    """What happened to one application during start."""

    index: int
    argv: List[str]
    cwd: Optional[Path]
    pid: Optional[int] = None
    input_error: Optional[TextOrKeyInputFailed] = None

    @property
    def input_ok(self) -> bool:
        return self.input_error is None


@dataclass
class StartReport:
    """Result of starting a project."""

    project: str
    workspace: Optional[str]
    layout_path: Optional[Path] = None
    outcomes: List[ApplicationOutcome] = field(default_factory=list)

    @property
    def input_failures(self) -> List[ApplicationOutcome]:
        return [o for o in self.outcomes if not o.input_ok]


def resolve_workspace(
    override: Optional[str], general: General
) -> Optional[str]:
    """Workspace precedence: CLI override > general.workspace > none."""
    if override is not None:
        return override
    return general.workspace


def resolve_working_directory(
    override: Optional[Path], application: Application, general: General
) -> Optional[Path]:
    """Working directory precedence.

    1. `--working-directory` command-line parameter
    2. `working_directory` of the application
    3. `working_directory` of the general section
    4. None (inherit the current directory)
    """
    if override is not None:
        return override
    if application.working_directory is not None:
        return application.working_directory
    return general.working_directory


class ProjectStarter:
    """Apply a project's layout and launch its applications."""

    def __init__(self, i3_client: I3Client, input_driver: Optional[InputDriver] = None):
        """Initialize starter.

        Args:
            i3_client: i3 IPC client for the workspace/layout commands
            input_driver: Driver for `exec` input (xdotool by default)
        """
        self.i3 = i3_client
        self.input_driver = input_driver or InputDriver()

    async def start(
        self,
        project: Project,
        working_directory: Optional[Path] = None,
        workspace: Optional[str] = None,
    ) -> StartReport:
        """Start the project.

        Args:
            project: Project to start
            working_directory: Overrides all configured working directories
            workspace: Overrides the configured workspace

        Returns:
            StartReport listing every started application; input failures are
            recorded there instead of raised

        Raises:
            ConfigParseError: If the configuration is invalid (nothing is started)
            UnknownConfig: If the managed layout doesn't exist
            InvalidUtf8Path: If the layout path is not valid UTF-8
            I3Error: If an i3 command could not be sent
            ApplicationSpawnFailed: If an application could not be started
        """
        config = project.config()
        general = config.general

        target_workspace = resolve_workspace(workspace, general)
        report = StartReport(project=project.name, workspace=target_workspace)

        with resolve_layout(general.layout, project.context.layouts) as layout_path:
            report.layout_path = layout_path

            if target_workspace is not None:
                logger.info(f"Switching to workspace {target_workspace}")
                await self.i3.focus_workspace(target_workspace)

            logger.info(f"Appending layout {layout_path}")
            await self.i3.append_layout(layout_path)

        for index, application in enumerate(config.applications):
            outcome = await self._start_application(
                index, application, general, working_directory, report
            )
            report.outcomes.append(outcome)

        return report

    async def _start_application(
        self,
        index: int,
        application: Application,
        general: General,
        working_directory: Optional[Path],
        report: StartReport,
    ) -> ApplicationOutcome:
        argv = application.command.argv
        cwd = resolve_working_directory(working_directory, application, general)
        outcome = ApplicationOutcome(index=index, argv=argv, cwd=cwd)

        logger.info(f"Starting application {index}: {application.command} (cwd: {cwd or '.'})")
        try:
            child = subprocess.Popen(
                argv,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            logger.error(f"Failed to start '{application.command}': {e}")
            raise ApplicationSpawnFailed(argv, e, report) from e

        outcome.pid = child.pid

        if application.exec is not None:
            try:
                await self.input_driver.drive(child.pid, application.exec)
            except TextOrKeyInputFailed as e:
                logger.warning(f"Input into '{application.command}' failed: {e}")
                outcome.input_error = e

        return outcome
