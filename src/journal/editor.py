"""Launch an external text editor on a journal entry."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

LOGGER = logging.getLogger(__name__)


def open_in_editor(path: Path, editor: str) -> int:
    """Open *path* in *editor* and wait for it to exit.

    The editor inherits the terminal. Returns the editor's exit status;
    raises ``FileNotFoundError`` when the binary does not exist.
    """
    LOGGER.debug("Opening %s with %s", path, editor)
    completed = subprocess.run([editor, str(path)], check=False)
    if completed.returncode != 0:
        LOGGER.warning("Editor %s exited with status %d", editor, completed.returncode)
    return completed.returncode
