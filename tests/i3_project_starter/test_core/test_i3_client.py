"""Unit tests for the i3 IPC client."""

import os
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from i3_project_starter.core.i3_client import I3Client, I3Error, path_to_utf8
from i3_project_starter.errors import InvalidUtf8Path

from fixtures.mock_i3_ipc import make_i3_connection


class TestI3Client:
    """Tests for I3Client."""

    @pytest.mark.asyncio
    async def test_connect_success(self):
        """Test successful i3 connection."""
        with patch("i3ipc.aio.Connection") as mock_connection_class:
            mock_conn = make_i3_connection()
            mock_connection_class.return_value.connect = AsyncMock(return_value=mock_conn)

            client = I3Client(socket_path="/run/user/1000/i3/ipc.sock")
            await client.connect()

            assert client._connection is mock_conn
            mock_connection_class.assert_called_once_with(socket_path="/run/user/1000/i3/ipc.sock")

    @pytest.mark.asyncio
    async def test_connect_failure(self):
        """Test i3 connection failure."""
        with patch("i3ipc.aio.Connection") as mock_connection_class:
            mock_connection_class.return_value.connect = AsyncMock(
                side_effect=FileNotFoundError("no socket")
            )

            client = I3Client()

            with pytest.raises(I3Error, match="Failed to connect"):
                await client.connect()

    @pytest.mark.asyncio
    async def test_context_manager(self):
        with patch("i3ipc.aio.Connection") as mock_connection_class:
            mock_conn = make_i3_connection()
            mock_connection_class.return_value.connect = AsyncMock(return_value=mock_conn)

            async with I3Client() as client:
                assert client._connection is not None

            assert client._connection is None
            mock_conn.main_quit.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_command(self, i3_client, mock_i3_connection):
        replies = await i3_client.command("workspace 1")

        assert replies == [{"success": True, "error": None}]
        mock_i3_connection.command.assert_awaited_once_with("workspace 1")

    @pytest.mark.asyncio
    async def test_unsuccessful_reply_is_only_logged(self, caplog):
        client = I3Client()
        client._connection = make_i3_connection(success=False, error="No such file")

        with caplog.at_level("WARNING", logger="i3start.i3_client"):
            ok = await client.append_layout(Path("/tmp/missing.json"))

        assert ok is False
        assert "No such file" in caplog.text

    @pytest.mark.asyncio
    async def test_transport_error(self, i3_client, mock_i3_connection):
        mock_i3_connection.command.side_effect = ConnectionResetError("socket closed")

        with pytest.raises(I3Error, match="workspace 1"):
            await i3_client.command("workspace 1")

    @pytest.mark.asyncio
    async def test_focus_workspace(self, i3_client, mock_i3_connection):
        assert await i3_client.focus_workspace("2:web") is True

        mock_i3_connection.command.assert_awaited_once_with("workspace 2:web")

    @pytest.mark.asyncio
    async def test_append_layout(self, i3_client, mock_i3_connection):
        await i3_client.append_layout(Path("/tmp/web layout.json"))

        mock_i3_connection.command.assert_awaited_once_with("append_layout /tmp/web layout.json")

    @pytest.mark.asyncio
    async def test_append_layout_invalid_utf8(self, i3_client, mock_i3_connection):
        path = Path(os.fsdecode(b"/tmp/\xfflayout.json"))

        with pytest.raises(InvalidUtf8Path):
            await i3_client.append_layout(path)

        mock_i3_connection.command.assert_not_awaited()


def test_path_to_utf8():
    assert path_to_utf8(Path("/tmp/web.json")) == "/tmp/web.json"
