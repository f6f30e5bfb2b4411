"""Exception types raised by the journal library."""

from __future__ import annotations


class JournalError(Exception):
    """Base class for every error the journal library raises on purpose."""


class EntryReadError(JournalError, OSError):
    """An entry file exists but its bytes are not valid UTF-8 text."""


class MetadataDecodeError(JournalError, ValueError):
    """The metadata block parsed as YAML but is not a string-keyed mapping."""


class WalkInvariantError(JournalError, RuntimeError):
    """A walk collected a different number of results than it dispatched."""


class EntryExistsError(JournalError, FileExistsError):
    """A new entry would overwrite an existing file."""
