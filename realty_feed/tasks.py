"""RQ task definitions for asynchronous feed imports."""

from __future__ import annotations

from pathlib import Path

from rq import get_current_job

from .config import DATABASE_CONFIG
from .core.exceptions import FeedImportError
from .pipelines import FeedImporter
from .storage import build_engine, session_factory, session_scope


def process_import(
    *,
    job_id: str,
    feed_path: str,
    only_load: bool = False,
    database_url: str | None = None,
) -> dict:
    """Import the uploaded feed at ``feed_path`` for the given job."""

    job = get_current_job()
    if job:
        job.meta["progress"] = 0
        job.save_meta()

    engine = build_engine(database_url or DATABASE_CONFIG.url)
    try:
        with session_scope(session_factory(engine)) as session:
            importer = FeedImporter.from_path(Path(feed_path), session)
            summary = importer.import_feed(only_load=only_load)
    except FeedImportError as exc:
        if job:
            job.meta["error"] = exc.as_dict()
            job.save_meta()
        raise
    finally:
        engine.dispose()

    if job:
        job.meta["progress"] = 100
        job.save_meta()

    result = summary.as_dict()
    result["job_id"] = job_id
    return result
