import os
from datetime import datetime, timezone
from pathlib import Path

import pytest

from try_picker.services.catalog import remove_entry, scan, touch


def test_scan_lists_only_directories_sorted(base_dir: Path):
    (base_dir / "b-dir").mkdir()
    (base_dir / "a-dir").mkdir()
    (base_dir / "file.txt").write_text("x")
    (base_dir / "a-dir" / "nested").mkdir()

    entries = scan(base_dir)

    assert [e.name for e in entries] == ["a-dir", "b-dir"]
    assert entries[0].path == base_dir / "a-dir"
    assert entries[0].score == 0.0


def test_scan_reads_mtime_as_access_time(base_dir: Path):
    target = base_dir / "exp"
    target.mkdir()
    ts = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc).timestamp()
    os.utime(target, (ts, ts))

    (entry,) = scan(base_dir)

    assert entry.accessed_at.timestamp() == pytest.approx(ts)
    assert entry.accessed_at.tzinfo is not None
    assert entry.created_at.tzinfo is not None


@pytest.mark.parametrize("missing", ["does-not-exist", "file.txt"])
def test_scan_unreadable_base_is_empty(base_dir: Path, missing):
    (base_dir / "file.txt").write_text("x")
    assert scan(base_dir / missing) == []


def test_touch_updates_mtime(base_dir: Path):
    target = base_dir / "exp"
    target.mkdir()
    os.utime(target, (0, 0))
    when = datetime(2025, 8, 14, 12, 0, tzinfo=timezone.utc)

    touch(target, when)

    assert target.stat().st_mtime == pytest.approx(when.timestamp())


def test_remove_entry_is_recursive(base_dir: Path):
    target = base_dir / "exp"
    (target / "deep" / "er").mkdir(parents=True)
    (target / "deep" / "file").write_text("x")

    remove_entry(target)

    assert not target.exists()


def test_remove_entry_missing_raises(base_dir: Path):
    with pytest.raises(OSError):
        remove_entry(base_dir / "gone")
