"""Rotation resolution tests: modification time wins over file names."""

from node_latency.sources import rotation
from node_latency.sources.rotation import (
    resolve_newest_log_file,
    resolve_oldest_log_file,
    sorted_asc_log_files,
)

from conftest import write_log


def test_oldest_and_newest_follow_mtime_not_name(tmp_path):
    older = write_log(tmp_path / "a.log.2", ["old"], mtime=1_000_000)
    newer = write_log(tmp_path / "a.log", ["new"], mtime=2_000_000)

    pattern = str(tmp_path / "a.log*")
    assert resolve_oldest_log_file(pattern) == str(older)
    assert resolve_newest_log_file(pattern) == str(newer)


def test_sorted_ascending_by_mtime(tmp_path):
    third = write_log(tmp_path / "messages", ["c"], mtime=3_000)
    first = write_log(tmp_path / "messages-20240101", ["a"], mtime=1_000)
    second = write_log(tmp_path / "messages.1.gz", ["b"], mtime=2_000, compress=True)

    assert sorted_asc_log_files(str(tmp_path / "messages*")) == [str(first), str(second), str(third)]


def test_no_matches_resolves_to_none(tmp_path):
    pattern = str(tmp_path / "nothing*")
    assert sorted_asc_log_files(pattern) == []
    assert resolve_oldest_log_file(pattern) is None
    assert resolve_newest_log_file(pattern) is None


def test_unstatable_file_falls_back_to_name_order(tmp_path, monkeypatch):
    a = write_log(tmp_path / "a.log", ["a"], mtime=5_000)
    b = write_log(tmp_path / "b.log", ["b"], mtime=1_000)

    real_mtime = rotation._mtime
    monkeypatch.setattr(rotation, "_mtime", lambda path: None if path == str(a) else real_mtime(path))

    # by mtime b would be oldest; a cannot be stat-ed so the pair compares by name
    assert resolve_oldest_log_file(str(tmp_path / "*.log")) == str(a)
    assert resolve_newest_log_file(str(tmp_path / "*.log")) == str(b)
