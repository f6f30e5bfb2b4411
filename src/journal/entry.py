"""Core Entry dataclass."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class Entry:
    """A single parsed journal file."""

    path: Path
    file_info: os.stat_result
    body: str
    metadata: dict[str, Any] = field(default_factory=dict)
    #: Set when the leading block exists but does not decode to a mapping
    metadata_error: Exception | None = None

    @property
    def tags(self) -> list[str]:
        """Normalized tags; the parser guarantees the key is always present."""
        return self.metadata["tags"]

    @property
    def id(self) -> str | None:
        """The entry's short identifier, or ``None`` when missing or empty."""
        value = self.metadata.get("id")
        if not isinstance(value, str) or not value:
            return None
        return value
