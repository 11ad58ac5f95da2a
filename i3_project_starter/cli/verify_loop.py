"""Interactive verification after editing a configuration.

After the editor exits, the configuration is verified. If verification fails,
the error is shown and the operator chooses to reopen the editor (`r`) or to
accept the configuration as it is (`a`):

    VERIFYING -> AWAITING_CHOICE -> RETRIED -> VERIFYING
                                 -> ACCEPTED

The loop has no iteration limit; it ends when verification succeeds or the
operator accepts.
"""

import logging
import os
import sys
import termios
import tty
from enum import Enum
from typing import Callable, List, Optional, Protocol, TextIO

from ..core.configfile import ConfigFile
from ..errors import I3StartError
from .output import print_error, print_success


logger = logging.getLogger("i3start.verify_loop")

PROMPT = "Reopen the editor (r) or accept the configuration anyway (a)? "


class VerifyState(str, Enum):
    """States of the verify loop."""

    VERIFYING = "verifying"
    AWAITING_CHOICE = "awaiting_choice"
    RETRIED = "retried"
    ACCEPTED = "accepted"


class CharReader(Protocol):
    """Source of single keypresses."""

    def read_char(self) -> str:
        """Return one character, or an empty string at end of input."""
        ...


class TerminalCharReader:
    """Read single characters without waiting for Enter.

    Falls back to a plain one-character read when the stream is not a TTY.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdin

    def read_char(self) -> str:
        fd = self.stream.fileno()
        if not os.isatty(fd):
            return self.stream.read(1)

        old_settings = termios.tcgetattr(fd)
        try:
            tty.setcbreak(fd)
            return self.stream.read(1)
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


class VerifyLoop:
    """Verify a configuration until it passes or the operator accepts it.

    Args:
        entity: Project or layout to verify
        on_reopen: Called when the operator asks to edit again
        reader: Source of the operator's choice
    """

    def __init__(
        self,
        entity: ConfigFile,
        on_reopen: Callable[[], object],
        reader: Optional[CharReader] = None,
    ):
        self.entity = entity
        self.on_reopen = on_reopen
        self.reader = reader or TerminalCharReader()
        self.history: List[VerifyState] = []

    def _enter(self, state: VerifyState) -> VerifyState:
        logger.debug(f"Verify loop for {self.entity.kind} '{self.entity.name}': {state.value}")
        self.history.append(state)
        return state

    def _ask(self) -> str:
        """Prompt until the operator presses `r` or `a`."""
        while True:
            print(PROMPT, end="", flush=True)
            char = self.reader.read_char()
            print()
            if not char:
                raise EOFError("no choice made before end of input")
            choice = char.lower()
            if choice in ("r", "a"):
                return choice

    def run(self) -> VerifyState:
        """Run the loop.

        Returns:
            VerifyState.ACCEPTED once the configuration passed verification
            or was accepted by the operator

        Raises:
            EOFError: If input ends while waiting for a choice
            I3StartError: Raised by `on_reopen`, e.g. EditorNotFound
        """
        state = self._enter(VerifyState.VERIFYING)
        while True:
            if state == VerifyState.VERIFYING:
                try:
                    self.entity.verify()
                except (I3StartError, OSError) as e:
                    print_error(f"Verification of {self.entity.kind} '{self.entity.name}' failed: {e}")
                    state = self._enter(VerifyState.AWAITING_CHOICE)
                else:
                    print_success(f"Verified {self.entity.kind} '{self.entity.name}'")
                    return self._enter(VerifyState.ACCEPTED)

            elif state == VerifyState.AWAITING_CHOICE:
                if self._ask() == "a":
                    return self._enter(VerifyState.ACCEPTED)
                state = self._enter(VerifyState.RETRIED)

            elif state == VerifyState.RETRIED:
                self.on_reopen()
                state = self._enter(VerifyState.VERIFYING)


def verify_with_retry(
    entity: ConfigFile,
    on_reopen: Callable[[], object],
    reader: Optional[CharReader] = None,
) -> None:
    """Verify `entity`, letting the operator reopen or accept on failure."""
    VerifyLoop(entity, on_reopen, reader).run()
