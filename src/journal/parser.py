"""Entry file parser: metadata block split, YAML decode and tag normalization."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from journal.entry import Entry
from journal.errors import EntryReadError, MetadataDecodeError

LOGGER = logging.getLogger(__name__)

#: File suffixes that are treated as journal entries
ENTRY_SUFFIXES = frozenset({".md", ".txt"})
#: A line equal to this (after stripping) ends the metadata block
DELIMITER = "---"

_BOOL_TAG = "tag:yaml.org,2002:bool"
_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class MetadataLoader(yaml.SafeLoader):
    """SafeLoader that keeps dates and yes/no/on/off as plain strings.

    Only ``true`` and ``false`` resolve to booleans; unquoted dates stay text.
    """


MetadataLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in (_BOOL_TAG, _TIMESTAMP_TAG)]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
MetadataLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def is_entry_path(path: Path) -> bool:
    """Return ``True`` when *path* is a regular file with an entry suffix.

    Symlinks are followed; directories, dangling links and special files
    (FIFOs, sockets, devices) are excluded.
    """
    path = Path(path)
    if not path.is_file():
        return False
    return path.suffix in ENTRY_SUFFIXES


def normalize_tags(raw: Any) -> list:
    """Coerce a raw ``tags`` value into a list.

    A comma-separated string is split and each piece stripped (``""`` yields
    ``[""]``). A list is returned as-is. ``None`` and every other type yield
    an empty list without complaint.
    """
    if isinstance(raw, str):
        return [piece.strip() for piece in raw.split(",")]
    if isinstance(raw, list):
        return raw
    return []


def decode_metadata(text: str) -> dict[str, Any]:
    """Decode *text* as a YAML mapping with string keys.

    Raises :class:`yaml.YAMLError` for invalid YAML and
    :class:`~journal.errors.MetadataDecodeError` for valid YAML of the wrong
    shape or with a value that cannot be constructed (``!!timestamp 2024-02-30``).
    An empty document decodes to ``{}``.
    """
    try:
        data = yaml.load(text, Loader=MetadataLoader)
    except yaml.YAMLError:
        raise
    except Exception as exc:
        raise MetadataDecodeError(f"could not construct metadata: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise MetadataDecodeError(
            f"expected a mapping at the top level, got {type(data).__name__}"
        )
    for key in data:
        if not isinstance(key, str):
            raise MetadataDecodeError(f"metadata key {key!r} is not a string")
    return data


def _read_lines(path: Path) -> list[str]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            return [line.rstrip("\n") for line in fh]
    except UnicodeDecodeError as exc:
        raise EntryReadError(f"{path}: not valid UTF-8 text ({exc.reason})") from exc


def parse_entry(path: Path) -> Entry:
    """Read the file at *path* and return a fully-populated :class:`Entry`.

    I/O failures propagate as :class:`OSError`. A metadata block that fails to
    decode does not fail the parse: the error is kept on the entry, metadata
    is left empty and the whole file becomes the body.
    """
    path = Path(path)
    lines = _read_lines(path)

    split_at: int | None = None
    for idx, line in enumerate(lines):
        if line.strip() == DELIMITER:
            split_at = idx
            break

    raw_block = lines if split_at is None else lines[:split_at]
    metadata: dict[str, Any] = {}
    metadata_error: Exception | None = None
    try:
        metadata = decode_metadata("\n".join(raw_block))
    except (yaml.YAMLError, MetadataDecodeError) as exc:
        LOGGER.debug("Metadata in %s did not decode: %s", path, exc)
        metadata_error = exc

    if metadata_error is not None:
        body = "\n".join(lines)
    elif split_at is None:
        # The whole file was a mapping; nothing is left for the body.
        body = ""
    else:
        body = "\n".join(lines[split_at + 1 :])

    metadata["tags"] = normalize_tags(metadata.get("tags"))

    return Entry(
        path=path,
        file_info=path.stat(),
        body=body,
        metadata=metadata,
        metadata_error=metadata_error,
    )
