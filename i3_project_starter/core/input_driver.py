"""Send text and keystrokes into a freshly started application.

Uses xdotool: every invocation first searches for a visible window owned by
the application's pid (waiting until one appears), focuses it, then types
text or sends keys to it. Each invocation is bounded by the Exec timeout.

Some applications ignore synthetic X11 events by default (xterm needs
`XTerm.vt100.allowSendEvents: true`, for example).
"""

import asyncio
import logging
from typing import List, Sequence

from ..errors import TextOrKeyInputFailed
from ..models.config import Exec, ExecType


logger = logging.getLogger("i3start.input_driver")

DEFAULT_TOOL = "xdotool"


def window_locator_args(pid: int) -> List[str]:
    """xdotool arguments that select and focus the window of `pid` as `%1`."""
    return [
        "search",
        "--sync",
        "--onlyvisible",
        "--any",
        "--pid",
        str(pid),
        "ignorepattern",
        "windowfocus",
        "--sync",
        "%1",
    ]


class InputDriver:
    """Drive text/key input into application windows through xdotool."""

    def __init__(self, tool: str = DEFAULT_TOOL):
        """Initialize input driver.

        Args:
            tool: Executable of the automation tool
        """
        self.tool = tool

    async def drive(self, pid: int, exec_config: Exec) -> None:
        """Send all input of `exec_config` to the window of `pid`.

        Stops at the first failing invocation.

        Args:
            pid: Process id of the started application
            exec_config: Commands, exec type and timeout

        Raises:
            TextOrKeyInputFailed: If an invocation timed out or could not run
        """
        locator = window_locator_args(pid)
        timeout = exec_config.timeout_seconds
        commands = exec_config.commands

        logger.info(
            f"Sending {len(commands)} command(s) to pid {pid} "
            f"({exec_config.exec_type.value}, timeout {timeout}s)"
        )

        if exec_config.exec_type == ExecType.KEYS:
            await self._run([*locator, "key", "--window", "%1", *commands], timeout)
            return

        for command in commands:
            await self._run([*locator, "type", "--window", "%1", command], timeout)
            if exec_config.exec_type == ExecType.TEXT:
                await self._run([*locator, "key", "--window", "%1", "Return"], timeout)

    async def _run(self, args: Sequence[str], timeout: float) -> None:
        """Run the tool once, killing it if it outlives `timeout`.

        The exit status is not interpreted.
        """
        cmd = [self.tool, *args]
        logger.debug(f"Subprocess call: {' '.join(cmd)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            raise TextOrKeyInputFailed(f"could not run {self.tool}: {e}") from e

        try:
            returncode = await asyncio.wait_for(process.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            try:
                process.kill()
            except ProcessLookupError:
                pass  # exited between the timeout and the kill
            await process.wait()
            logger.warning(f"{self.tool} did not finish within {timeout}s, killed it")
            raise TextOrKeyInputFailed(f"{self.tool} timed out after {timeout}s")

        logger.debug(f"  Return code: {returncode}")
