"""Fake processes and input for the starter, input driver and verify loop."""

import asyncio
from typing import Iterable, List


class FakeProcess:
    """Stand-in for asyncio.subprocess.Process.

    Args:
        exits: Whether the process exits on its own; when False, `wait()`
            only returns after `kill()`
        returncode: Exit status reported when it exits on its own
    """

    def __init__(self, exits: bool = True, returncode: int = 0):
        self.returncode = returncode if exits else None
        self.killed = False
        self._exited = asyncio.Event()
        if exits:
            self._exited.set()

    async def wait(self) -> int:
        await self._exited.wait()
        return self.returncode

    def kill(self) -> None:
        self.killed = True
        self.returncode = -9
        self._exited.set()


class ScriptedCharReader:
    """CharReader returning prepared keypresses, then end of input."""

    def __init__(self, chars: Iterable[str]):
        self.chars: List[str] = list(chars)
        self.reads = 0

    def read_char(self) -> str:
        self.reads += 1
        if not self.chars:
            return ""
        return self.chars.pop(0)
