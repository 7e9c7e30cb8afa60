"""Journal reader and source tests with a stubbed journal decoder."""

import os
import subprocess
from datetime import datetime, timezone

import pytest

from node_latency.errors import SourceUnavailableError
from node_latency.sources import Event, JournalSource, read_journal
from node_latency.sources import journal


class StubDecoder:
    """Returns canned journal text and records which paths were decoded."""

    def __init__(self, text: str):
        self.text = text
        self.calls = []

    def __call__(self, path: str) -> bytes:
        self.calls.append(path)
        return self.text.encode("utf-8")


def _journal_text(year):
    return "\n".join(
        [
            f"{year}-03-05T08:00:04+0000 host kubelet[901]: Successfully registered node host",
            f"{year}-03-05T08:00:01+0000 host systemd[1]: Starting containerd container runtime...",
            f"{year}-03-05T08:00:02+0000 host containerd[812]: containerd successfully booted in 0.1s",
        ]
    )


@pytest.fixture
def journal_dir(tmp_path):
    newest = tmp_path / "journal" / "aaaa"
    stale = tmp_path / "journal" / "bbbb"
    newest.mkdir(parents=True)
    stale.mkdir(parents=True)
    os.utime(newest, (3_000_000, 3_000_000))
    os.utime(stale, (1_000_000, 1_000_000))
    # "aaaa" sorts first by name but is the most recently modified
    return tmp_path / "journal", newest


def test_newest_journal_is_decoded(journal_dir, year):
    root, newest = journal_dir
    decoder = StubDecoder(_journal_text(year))
    source = JournalSource(str(root / "*"), decoder=decoder)

    event = Event(
        name="Containerd Initialized",
        metric="containerd_initialized",
        src=source,
        match_fn=source.find_by_regex(r"(?m)^.*containerd successfully booted.*$"),
    )
    (result,) = source.find(event)

    assert decoder.calls == [str(newest)]
    assert result.timestamp == datetime(year, 3, 5, 8, 0, 2, tzinfo=timezone.utc)


def test_journal_results_sorted_and_cached(journal_dir, year):
    root, _ = journal_dir
    decoder = StubDecoder(_journal_text(year))
    source = JournalSource(str(root / "*"), decoder=decoder)
    event = Event(
        name="Any",
        metric="any",
        match_selector="all",
        src=source,
        match_fn=source.find_by_regex(r"(?m)^\S+ host .*$"),
    )

    results = source.find(event)
    assert [r.timestamp.second for r in results] == [1, 2, 4]

    source.find(event)
    assert len(decoder.calls) == 1

    source.clear_cache()
    source.find(event)
    assert len(decoder.calls) == 2


def test_decoder_os_error_is_unavailable(journal_dir):
    root, _ = journal_dir

    def broken(path):
        raise PermissionError(f"denied: {path}")

    source = JournalSource(str(root / "*"), decoder=broken)
    with pytest.raises(SourceUnavailableError) as exc_info:
        source.journal_reader.read()
    assert isinstance(exc_info.value.__cause__, PermissionError)


def test_decoder_failure_of_any_kind_is_unavailable(journal_dir):
    root, newest = journal_dir

    def corrupt(path):
        raise ValueError("corrupt journal header")

    source = JournalSource(str(root / "*"), decoder=corrupt)
    with pytest.raises(SourceUnavailableError) as exc_info:
        source.journal_reader.read()
    assert str(newest) in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, ValueError)

    # nothing cached, so a working decoder succeeds on the next read
    source.journal_reader.decoder = StubDecoder("recovered")
    assert source.journal_reader.read() == b"recovered"


def test_source_identity():
    source = JournalSource("/var/log/journal/*", decoder=StubDecoder(""))
    assert source.name() == "Journal"
    assert str(source) == "/var/log/journal/*"


def test_read_journal_uses_directory_flag(tmp_path, monkeypatch):
    captured = {}

    def fake_run(cmd, capture_output, check):
        captured["cmd"] = cmd
        return subprocess.CompletedProcess(cmd, 0, stdout=b"entries", stderr=b"")

    monkeypatch.setattr(journal.subprocess, "run", fake_run)
    assert read_journal(str(tmp_path)) == b"entries"
    assert captured["cmd"] == ["journalctl", "--no-pager", "-o", "short-iso", f"--directory={tmp_path}"]


def test_read_journal_uses_file_flag(tmp_path, monkeypatch):
    captured = {}
    journal_file = tmp_path / "system.journal"
    journal_file.write_bytes(b"")

    def fake_run(cmd, capture_output, check):
        captured["cmd"] = cmd
        return subprocess.CompletedProcess(cmd, 0, stdout=b"", stderr=b"")

    monkeypatch.setattr(journal.subprocess, "run", fake_run)
    read_journal(str(journal_file))
    assert captured["cmd"][-1] == f"--file={journal_file}"


def test_read_journal_failure_is_unavailable(tmp_path, monkeypatch):
    def fake_run(cmd, capture_output, check):
        return subprocess.CompletedProcess(cmd, 1, stdout=b"", stderr=b"Failed to open journal")

    monkeypatch.setattr(journal.subprocess, "run", fake_run)
    with pytest.raises(SourceUnavailableError) as exc_info:
        read_journal(str(tmp_path))
    assert "Failed to open journal" in str(exc_info.value)


def test_read_journal_missing_binary_is_unavailable(tmp_path):
    with pytest.raises(SourceUnavailableError):
        read_journal(str(tmp_path), journalctl=str(tmp_path / "no-such-journalctl"))
