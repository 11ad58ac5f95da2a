"""Open configuration files in the user's editor."""

import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import List, Mapping, Optional

from ..errors import EditorNotFound


logger = logging.getLogger("i3start.editor")


def find_editor(environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """Editor command line from $VISUAL, then $EDITOR.

    Values are shell-split, so `EDITOR="nano -w"` works.

    Raises:
        EditorNotFound: If both are unset or empty
    """
    environ = os.environ if environ is None else environ
    for variable in ("VISUAL", "EDITOR"):
        value = environ.get(variable, "").strip()
        if value:
            return shlex.split(value)
    raise EditorNotFound()


def open_editor(path: Path, environ: Optional[Mapping[str, str]] = None) -> int:
    """Open `path` in the editor and wait for it to exit.

    Returns:
        Exit code of the editor

    Raises:
        EditorNotFound: If no editor is configured
        OSError: If the editor cannot be executed
    """
    cmd = [*find_editor(environ), str(path)]
    logger.debug(f"Subprocess call: {' '.join(cmd)}")
    result = subprocess.run(cmd, check=False)
    if result.returncode != 0:
        logger.warning(f"Editor exited with code {result.returncode}")
    return result.returncode
