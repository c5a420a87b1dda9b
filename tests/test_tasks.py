from __future__ import annotations

from pathlib import Path

import pytest

from realty_feed import tasks
from realty_feed.core.exceptions import FormatError


class FakeJob:
    def __init__(self) -> None:
        self.meta: dict = {}
        self.saved = 0

    def save_meta(self) -> None:
        self.saved += 1


def test_process_import_returns_summary(tmp_path: Path, monkeypatch, two_offer_feed: bytes):
    job = FakeJob()
    monkeypatch.setattr(tasks, "get_current_job", lambda: job)
    feed_path = tmp_path / "feed.xml"
    feed_path.write_bytes(two_offer_feed)

    result = tasks.process_import(
        job_id="job-1",
        feed_path=str(feed_path),
        database_url=f"sqlite:///{tmp_path / 'tasks.db'}",
    )

    assert result["job_id"] == "job-1"
    assert result["imported"] == 2
    assert job.meta["progress"] == 100


def test_process_import_records_errors(tmp_path: Path, monkeypatch):
    job = FakeJob()
    monkeypatch.setattr(tasks, "get_current_job", lambda: job)
    feed_path = tmp_path / "feed.xml"
    feed_path.write_bytes(b"<realty-feed>")

    with pytest.raises(FormatError):
        tasks.process_import(
            job_id="job-2",
            feed_path=str(feed_path),
            database_url=f"sqlite:///{tmp_path / 'tasks.db'}",
        )

    assert job.meta["error"]["error"] == "FormatError"
    assert job.meta["progress"] == 0
