"""i3 IPC client for the commands used when starting a project.

This module provides an async wrapper around i3ipc.aio for sending
RUN_COMMAND messages:
- `workspace <name>` to switch to the target workspace
- `append_layout <path>` to restore a saved layout

Commands are fire-and-forget: transport failures raise I3Error, replies with
`success = false` are only logged.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import i3ipc.aio

from ..errors import I3StartError, InvalidUtf8Path


# Get logger for this module
logger = logging.getLogger("i3start.i3_client")


class I3Error(I3StartError):
    """Exception raised for i3 IPC errors."""

    pass


def path_to_utf8(path: Path) -> str:
    """Render a path for an i3 command.

    Raises:
        InvalidUtf8Path: If the path contains bytes that are not UTF-8
    """
    text = str(path)
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        raise InvalidUtf8Path(text.encode("utf-8", "surrogateescape").decode("utf-8", "replace"))
    return text


class I3Client:
    """Async wrapper for i3ipc commands."""

    def __init__(self, socket_path: Optional[str] = None):
        """Initialize i3 client.

        Args:
            socket_path: i3 IPC socket (i3ipc discovers it when None)
        """
        self.socket_path = socket_path
        self._connection: Optional[i3ipc.aio.Connection] = None

    async def connect(self) -> None:
        """Connect to i3 IPC socket.

        Raises:
            I3Error: If connection fails
        """
        try:
            logger.debug("Connecting to i3 IPC socket")
            self._connection = await i3ipc.aio.Connection(socket_path=self.socket_path).connect()
            logger.info("Connected to i3 IPC")
        except Exception as e:
            logger.error(f"Failed to connect to i3 IPC: {e}")
            raise I3Error(f"Failed to connect to i3: {e}")

    async def close(self) -> None:
        """Close i3 connection."""
        if self._connection:
            self._connection.main_quit()
            self._connection = None

    async def command(self, cmd: str) -> List[Dict[str, Any]]:
        """Send command to i3 (RUN_COMMAND).

        Args:
            cmd: i3 command string

        Returns:
            List of command result dicts with 'success' and 'error' keys

        Raises:
            I3Error: If the command could not be sent
        """
        if not self._connection:
            await self.connect()

        try:
            logger.debug(f"IPC command: {cmd}")
            results = await self._connection.command(cmd)
        except Exception as e:
            logger.error(f"RUN_COMMAND failed for '{cmd}': {e}")
            raise I3Error(f"Failed to execute command '{cmd}': {e}")

        replies = [{"success": r.success, "error": getattr(r, "error", None)} for r in results]
        for reply in replies:
            if not reply["success"]:
                logger.warning(f"i3 rejected '{cmd}': {reply['error']}")
        success_count = sum(1 for r in replies if r["success"])
        logger.debug(f"RUN_COMMAND completed: {success_count}/{len(replies)} succeeded")
        return replies

    async def focus_workspace(self, workspace: str) -> bool:
        """Switch to a workspace by name.

        Args:
            workspace: Workspace name (e.g. "1" or "2:web")

        Returns:
            True if i3 reported success

        Raises:
            I3Error: If the command could not be sent
        """
        results = await self.command(f"workspace {workspace}")
        return all(r["success"] for r in results)

    async def append_layout(self, path: Path) -> bool:
        """Append a saved layout to the focused workspace.

        Args:
            path: Layout file

        Returns:
            True if i3 reported success

        Raises:
            InvalidUtf8Path: If the path is not valid UTF-8 (nothing is sent)
            I3Error: If the command could not be sent
        """
        results = await self.command(f"append_layout {path_to_utf8(path)}")
        return all(r["success"] for r in results)

    async def __aenter__(self):
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
