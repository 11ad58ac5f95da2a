"""Pytest configuration and shared fixtures for i3_project_starter tests."""

import logging
from itertools import count
from pathlib import Path
from typing import Callable, Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from i3_project_starter.core.context import ConfigContext
from i3_project_starter.core.i3_client import I3Client
from i3_project_starter.core.input_driver import InputDriver
from i3_project_starter.core.project import Project

from fixtures.mock_i3_ipc import make_i3_connection
from fixtures.sample_configs import LAYOUT_FILE_CONTENTS


@pytest.fixture(autouse=True)
def restore_logger():
    """Undo logging configuration done by the CLI during a test."""
    logger = logging.getLogger("i3start")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


@pytest.fixture
def config_context(tmp_path: Path) -> ConfigContext:
    """Context on an empty temporary configuration directory."""
    return ConfigContext(tmp_path / "config")


@pytest.fixture
def layout_file(tmp_path: Path) -> Path:
    """A layout file outside of the configuration directory."""
    path = tmp_path / "layouts" / "web.json"
    path.parent.mkdir(parents=True)
    path.write_text(LAYOUT_FILE_CONTENTS)
    return path


@pytest.fixture
def write_project(config_context: ConfigContext) -> Callable[[str, str], Project]:
    """Factory writing `projects/<name>.toml` and returning its handle."""

    def _write(name: str, document: str) -> Project:
        directory = config_context.projects.directory
        directory.mkdir(parents=True, exist_ok=True)
        (directory / f"{name}.toml").write_text(document)
        return config_context.projects.open(name)

    return _write


@pytest.fixture
def mock_i3_connection() -> AsyncMock:
    """Mock i3ipc.aio.Connection whose commands all succeed."""
    return make_i3_connection()


@pytest.fixture
def i3_client(mock_i3_connection: AsyncMock) -> I3Client:
    """I3Client already connected to the mock connection."""
    client = I3Client()
    client._connection = mock_i3_connection
    return client


@pytest.fixture
def mock_input_driver() -> AsyncMock:
    """Input driver that succeeds without running xdotool."""
    return AsyncMock(spec=InputDriver)


@pytest.fixture
def mock_popen() -> Generator[MagicMock, None, None]:
    """Patch subprocess.Popen in the starter; children get pids 1000, 1001, ..."""
    pids = count(1000)

    def _spawn(*args, **kwargs):
        return MagicMock(pid=next(pids))

    with patch("i3_project_starter.core.starter.subprocess.Popen", side_effect=_spawn) as popen:
        yield popen
