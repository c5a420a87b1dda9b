"""Command line entry point for importing a realty feed."""

from __future__ import annotations

import argparse
import json
import logging
from typing import Sequence

from .config import DATABASE_CONFIG, IMPORT_CONFIG
from .core.exceptions import FeedImportError
from .pipelines import FeedImporter
from .storage import build_engine, session_factory, session_scope

LOGGER = logging.getLogger(__name__)


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Import a Yandex realty feed (XML or archived XML).")
    parser.add_argument("feed", help="Path to the feed file")
    parser.add_argument(
        "--only-load",
        action="store_true",
        help="Parse the feed without creating any entities.",
    )
    parser.add_argument("--database-url", default=DATABASE_CONFIG.url, help="SQLAlchemy database URL")
    parser.add_argument("--site-name", default=IMPORT_CONFIG.site_name, help="Name of the publishing site")
    parser.add_argument("--site-url", default=IMPORT_CONFIG.site_url, help="URL of the publishing site")
    parser.add_argument(
        "--skip-invalid",
        action="store_true",
        help="Skip listings with missing or unknown values instead of aborting the import.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    policy = "skip" if args.skip_invalid else IMPORT_CONFIG.on_listing_error
    engine = build_engine(args.database_url)
    try:
        with session_scope(session_factory(engine)) as session:
            importer = FeedImporter.from_path(
                args.feed,
                session,
                site_name=args.site_name,
                site_url=args.site_url,
                on_listing_error=policy,
            )
            summary = importer.import_feed(only_load=args.only_load)
    except FeedImportError as exc:
        LOGGER.error("Import failed: %s", exc)
        return 1
    finally:
        engine.dispose()

    print(json.dumps(summary.as_dict(), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
