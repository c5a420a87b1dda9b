from __future__ import annotations

import json
import sqlite3
from pathlib import Path

from feeds import feed_xml, offer_xml
from realty_feed.cli import main


def test_cli_imports_feed(tmp_path: Path, capsys, two_offer_feed: bytes):
    feed_path = tmp_path / "feed.xml"
    feed_path.write_bytes(two_offer_feed)
    database = tmp_path / "cli.db"

    exit_code = main([str(feed_path), "--database-url", f"sqlite:///{database}"])

    assert exit_code == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["imported"] == 2
    with sqlite3.connect(database) as connection:
        assert connection.execute("SELECT COUNT(*) FROM offers").fetchone() == (2,)


def test_cli_only_load(tmp_path: Path, capsys, two_offer_feed: bytes):
    feed_path = tmp_path / "feed.xml"
    feed_path.write_bytes(two_offer_feed)

    exit_code = main([str(feed_path), "--only-load", "--database-url", f"sqlite:///{tmp_path / 'cli.db'}"])

    assert exit_code == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["only_load"] is True
    assert summary["listings_seen"] == 2


def test_cli_skip_invalid(tmp_path: Path, capsys):
    feed_path = tmp_path / "feed.xml"
    feed_path.write_bytes(feed_xml(offer_xml("A"), offer_xml("B", category="Гараж")))

    exit_code = main([str(feed_path), "--skip-invalid", "--database-url", f"sqlite:///{tmp_path / 'cli.db'}"])

    assert exit_code == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["imported"] == 1
    assert summary["skipped"][0]["internal_id"] == "B"


def test_cli_reports_failures(tmp_path: Path):
    feed_path = tmp_path / "feed.xml"
    feed_path.write_bytes(feed_xml(offer_xml("A", offer_type="обмен")))

    exit_code = main([str(feed_path), "--database-url", f"sqlite:///{tmp_path / 'cli.db'}"])

    assert exit_code == 1
