"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

#: Environment variable that overrides the journal directory
PATH_ENV = "JRNI_PATH"
#: Environment variable naming the editor binary
EDITOR_ENV = "EDITOR"
DEFAULT_EDITOR = "nvim"


def _get_default_journal_path() -> Path:
    return Path.home() / "sink" / "journal"


@dataclass(slots=True)
class JournalConfig:
    journal_path: Path = field(default_factory=_get_default_journal_path)
    editor: str = DEFAULT_EDITOR

    @classmethod
    def from_env(
        cls,
        path: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "JournalConfig":
        """Resolve configuration from an explicit *path* and the environment.

        The journal directory comes from *path*, else ``$JRNI_PATH``, else
        ``~/sink/journal``. The editor comes from ``$EDITOR``, else ``nvim``.
        """
        env = os.environ if environ is None else environ
        if path is not None:
            journal_path = Path(path)
        elif env.get(PATH_ENV):
            journal_path = Path(env[PATH_ENV])
        else:
            journal_path = _get_default_journal_path()
        return cls(
            journal_path=journal_path.expanduser(),
            editor=env.get(EDITOR_ENV) or DEFAULT_EDITOR,
        )
