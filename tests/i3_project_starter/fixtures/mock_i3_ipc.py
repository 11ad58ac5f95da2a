"""Mock i3 IPC connection for testing."""

from dataclasses import dataclass
from typing import Optional
from unittest.mock import AsyncMock, MagicMock


@dataclass
class MockCommandReply:
    """Mock i3 RUN_COMMAND reply."""
    success: bool = True
    error: Optional[str] = None


def make_i3_connection(success: bool = True, error: Optional[str] = None) -> AsyncMock:
    """Mocked i3ipc.aio.Connection answering every command with one reply."""
    mock = AsyncMock()
    mock.command.return_value = [MockCommandReply(success=success, error=error)]
    mock.main_quit = MagicMock()
    return mock
