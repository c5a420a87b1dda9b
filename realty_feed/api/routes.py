"""REST API blueprint."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request
from rq.exceptions import NoSuchJobError
from rq.job import Job

from ..config import APP_CONFIG, STORAGE_PATHS
from ..storage import EntityList, Offer, RealtyObject, session_scope
from ..utils import ensure_directory, has_extension, safe_filename

api_bp = Blueprint("api", __name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}


@api_bp.post("/imports")
def create_import():
    """Queue an import job for an uploaded feed."""

    feed = request.files.get("feed")
    if feed is None or not feed.filename:
        return jsonify({"error": "feed field is required"}), 400
    if not has_extension(feed.filename, APP_CONFIG.allowed_feed_extensions):
        return jsonify({"error": f"Invalid feed file: {feed.filename}"}), 400

    job_id = str(uuid.uuid4())
    job_dir = ensure_directory(STORAGE_PATHS.uploads / job_id)
    feed_path = job_dir / safe_filename(feed.filename)
    feed.save(feed_path)

    only_load = request.form.get("only_load", "").strip().lower() in _TRUE_VALUES
    created_at = datetime.now(timezone.utc).isoformat()

    job = _queue().enqueue(
        "realty_feed.tasks.process_import",
        kwargs={
            "job_id": job_id,
            "feed_path": str(feed_path),
            "only_load": only_load,
            "database_url": current_app.config["DATABASE_URL"],
        },
        job_id=job_id,
        meta={"created_at": created_at},
    )

    response = {
        "job_id": job.id,
        "status": job.get_status(refresh=False),
        "created_at": created_at,
        "only_load": only_load,
    }
    return jsonify(response), 202


@api_bp.get("/imports/<job_id>")
def import_status(job_id: str):
    try:
        job = Job.fetch(job_id, connection=_connection())
    except NoSuchJobError:
        return jsonify({"error": "Job not found"}), 404

    payload: dict[str, object] = {
        "job_id": job.id,
        "status": job.get_status(refresh=True),
        "created_at": job.meta.get("created_at"),
    }

    if job.is_finished:
        payload["result"] = job.result or {}
        return jsonify(payload), 200
    if job.is_failed:
        payload["error"] = job.meta.get("error", job.exc_info)
        return jsonify(payload), 500

    payload["progress"] = job.meta.get("progress", 0)
    return jsonify(payload), 200


@api_bp.get("/objects")
def list_objects():
    return _entity_page(RealtyObject)


@api_bp.get("/offers")
def list_offers():
    return _entity_page(Offer)


def _entity_page(model):
    try:
        start = int(request.args.get("start", 0))
        size = int(request.args.get("size", APP_CONFIG.default_page_size))
    except ValueError:
        return jsonify({"error": "start and size must be integers"}), 400
    if start < 0 or size < 0:
        return jsonify({"error": "start and size must be non-negative"}), 400
    size = min(size, APP_CONFIG.max_page_size)

    with session_scope(_sessions()) as session:
        page = EntityList(session, model, start=start, limit=size)
        payload = {
            "total": page.total,
            "start": start,
            "size": size,
            "items": [entity.as_dict() for entity in page.objects],
        }
    return jsonify(payload), 200


def _queue():
    return current_app.extensions["rq"]["queue"]


def _connection():
    return current_app.extensions["rq"]["connection"]


def _sessions():
    return current_app.extensions["db"]["sessions"]
