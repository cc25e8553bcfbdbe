import logging

from flask import abort, jsonify, url_for
from flask_login import current_user, login_required
from sqlalchemy import delete, select

from ... import store
from ...extensions import db, file_store
from ...files import CATEGORIES
from ...models import TimetableEntry
from ...utils import payload, uploaded_file
from ..auth.routes import role_required
from . import bp

logger = logging.getLogger(__name__)


def _file_url(stored_name):
    return url_for("uploads.serve", folder=CATEGORIES["timetable"], filename=stored_name)


@bp.get("")
def list_timetable():
    stmt = select(TimetableEntry.__table__).order_by(TimetableEntry.day, TimetableEntry.period)
    return jsonify(store.query_all(stmt))


@bp.post("")
@login_required
@role_required("teacher")
def publish_timetable():
    data = payload()
    entries = data.get("entries")
    if not isinstance(entries, list):
        abort(400, "Invalid body")

    rows = [
        TimetableEntry(day=str(e["day"]), period=str(e["period"]),
                       subject=str(e["subject"]), teacher_id=current_user.user_id)
        for e in entries
        if isinstance(e, dict) and e.get("day") and e.get("period") and e.get("subject")
    ]
    with store.transaction():
        store.execute(delete(TimetableEntry))
        db.session.add_all(rows)
    logger.info("Timetable published by %s: %d entries (%d skipped)",
                current_user.user_id, len(rows), len(entries) - len(rows))
    return jsonify(ok=True, count=len(rows))


@bp.post("/upload")
@login_required
@role_required("teacher")
def upload_timetable():
    f = uploaded_file("file")
    if f is None:
        abort(400, "file required")
    stored = file_store().save_upload("timetable", f.filename, f.read())
    return jsonify(ok=True, file=_file_url(stored))


@bp.get("/file")
def latest_timetable_file():
    latest = file_store().latest_upload("timetable")
    return jsonify(file=_file_url(latest) if latest else None)
