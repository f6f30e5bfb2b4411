"""Unit tests for journal.walker."""

import os
import threading
from pathlib import Path

import pytest

from journal.entry import Entry
from journal.parser import parse_entry
from journal.walker import WalkResult, iter_entry_paths, walk_journal


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture()
def journal(tmp_path: Path) -> Path:
    """Journal tree with nested entries and files that must be ignored."""
    _write(tmp_path / "2024-01-01-a.md", "tags: x\nid: a\n---\nfirst")
    _write(tmp_path / "2024-01-02-b.txt", "tags: [x, y]\n---\nsecond")
    _write(tmp_path / "sub" / "deeper" / "c.md", "plain prose")
    _write(tmp_path / "notes.rst", "id: nope\n---\n")
    _write(tmp_path / "README", "id: nope\n---\n")
    (tmp_path / "folder.md").mkdir()
    return tmp_path


# ---------------------------------------------------------------------------
# iter_entry_paths
# ---------------------------------------------------------------------------


class TestIterEntryPaths:
    def test_only_eligible_files(self, journal: Path):
        names = {p.name for p in iter_entry_paths(journal)}
        assert names == {"2024-01-01-a.md", "2024-01-02-b.txt", "c.md"}

    def test_single_file_root(self, journal: Path):
        root = journal / "2024-01-01-a.md"
        assert list(iter_entry_paths(root)) == [root]

    def test_ineligible_file_root(self, journal: Path):
        assert list(iter_entry_paths(journal / "README")) == []

    def test_missing_root(self, tmp_path: Path):
        assert list(iter_entry_paths(tmp_path / "nowhere")) == []

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_follows_directory_symlinks(self, tmp_path: Path):
        outside = tmp_path / "outside"
        _write(outside / "linked.md", "id: l\n---\n")
        root = tmp_path / "journal"
        root.mkdir()
        (root / "link").symlink_to(outside, target_is_directory=True)
        names = {p.name for p in iter_entry_paths(root)}
        assert names == {"linked.md"}

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_skips_dangling_symlink(self, journal: Path):
        (journal / "gone.md").symlink_to(journal / "missing.md")
        names = {p.name for p in iter_entry_paths(journal)}
        assert "gone.md" not in names

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="FIFOs unsupported")
    def test_skips_fifo(self, journal: Path):
        os.mkfifo(journal / "pipe.md")
        names = {p.name for p in iter_entry_paths(journal)}
        assert "pipe.md" not in names


# ---------------------------------------------------------------------------
# walk_journal
# ---------------------------------------------------------------------------


class TestWalkJournal:
    def test_one_result_per_eligible_path(self, journal: Path):
        results = walk_journal(journal, parse_entry)
        assert len(results) == 3
        assert all(isinstance(r, WalkResult) for r in results)
        assert all(isinstance(r.value, Entry) for r in results)

    def test_ineligible_paths_never_converted(self, journal: Path):
        seen: list[Path] = []
        lock = threading.Lock()

        def record(path: Path) -> str:
            with lock:
                seen.append(path)
            return path.name

        walk_journal(journal, record)
        assert {p.name for p in seen} == {"2024-01-01-a.md", "2024-01-02-b.txt", "c.md"}

    def test_errors_are_kept_per_path(self, journal: Path):
        def convert(path: Path) -> str:
            if path.name == "c.md":
                raise OSError("boom")
            return path.name

        results = walk_journal(journal, convert)
        assert len(results) == 3
        failed = [r for r in results if not r.ok]
        assert len(failed) == 1
        assert failed[0].path.name == "c.md"
        assert isinstance(failed[0].error, OSError)
        assert {r.value for r in results if r.ok} == {"2024-01-01-a.md", "2024-01-02-b.txt"}

    def test_unwrap_reraises(self, journal: Path):
        def convert(path: Path) -> str:
            raise ValueError(path.name)

        results = walk_journal(journal, convert)
        with pytest.raises(ValueError):
            results[0].unwrap()

    def test_unwrap_returns_value(self, journal: Path):
        results = walk_journal(journal, lambda p: p.stem)
        assert {r.unwrap() for r in results} == {"2024-01-01-a", "2024-01-02-b", "c"}

    def test_repeated_walks_are_set_stable(self, journal: Path):
        def snapshot() -> set:
            return {
                (r.path, r.value.id, tuple(r.value.tags), r.value.body)
                for r in walk_journal(journal, parse_entry)
            }

        first = snapshot()
        for _ in range(5):
            assert snapshot() == first

    def test_runs_on_worker_threads(self, journal: Path):
        caller = threading.get_ident()
        results = walk_journal(journal, lambda p: threading.get_ident(), max_workers=2)
        assert all(r.value != caller for r in results)

    def test_many_entries_none_dropped(self, tmp_path: Path):
        for i in range(200):
            _write(tmp_path / f"d{i % 7}" / f"{i}.md", f"id: e{i}\n---\nbody {i}")
        results = walk_journal(tmp_path, parse_entry, max_workers=4)
        assert len(results) == 200
        assert {r.value.id for r in results} == {f"e{i}" for i in range(200)}

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_dangling_symlink_produces_no_result(self, tmp_path: Path):
        (tmp_path / "gone.md").symlink_to(tmp_path / "missing.md")
        assert walk_journal(tmp_path, parse_entry) == []

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="FIFOs unsupported")
    def test_fifo_produces_no_result(self, journal: Path):
        os.mkfifo(journal / "pipe.md")
        results = walk_journal(journal, parse_entry)
        assert len(results) == 3
        assert all(r.ok for r in results)

    def test_empty_directory(self, tmp_path: Path):
        assert walk_journal(tmp_path, parse_entry) == []

    def test_unreadable_file_is_a_per_item_error(self, journal: Path):
        broken = journal / "broken.md"
        broken.write_bytes(b"\xff\xfe\xfd")
        results = walk_journal(journal, parse_entry)
        assert len(results) == 4
        by_name = {r.path.name: r for r in results}
        assert isinstance(by_name["broken.md"].error, OSError)
        assert by_name["2024-01-01-a.md"].ok
