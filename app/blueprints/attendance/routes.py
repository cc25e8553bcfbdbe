import logging

from flask import abort, jsonify, request
from flask_login import current_user, login_required
from sqlalchemy import select

from ... import store
from ...extensions import db
from ...models import AttendanceRecord, User
from ...utils import parse_date, payload, to_int
from ..auth.routes import role_required, self_or_teacher
from . import bp

logger = logging.getLogger(__name__)


def _as_bool(value):
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@bp.post("/mark")
@login_required
@role_required("teacher")
def mark_attendance():
    data = payload()
    day = data.get("date")
    marks = data.get("marks")
    if not day or not isinstance(marks, list):
        abort(400, "Invalid body")
    day = parse_date(day, "date")

    count = 0
    with store.transaction():
        for m in marks:
            if not isinstance(m, dict) or m.get("student_id") is None or m.get("present") is None:
                continue
            student_id = to_int(m["student_id"], "student_id")
            present = _as_bool(m["present"])
            rec = (AttendanceRecord.query
                   .filter_by(student_id=student_id, date=day).one_or_none())
            if rec is None:
                db.session.add(AttendanceRecord(student_id=student_id, date=day, present=present))
                db.session.flush()
            else:
                rec.present = present
            count += 1
    logger.info("Attendance for %s marked by %s: %d records", day, current_user.user_id, count)
    return jsonify(ok=True, count=count)


@bp.get("")
@login_required
def list_attendance():
    student_id = request.args.get("student_id")
    day = request.args.get("date")
    if student_id:
        student_id = to_int(student_id, "student_id")
        self_or_teacher(student_id)
        stmt = (select(AttendanceRecord.date, AttendanceRecord.present)
                .where(AttendanceRecord.student_id == student_id)
                .order_by(AttendanceRecord.date.desc()))
        return jsonify(store.query_all(stmt))
    if day:
        if current_user.role != "teacher":
            abort(403, "Forbidden")
        stmt = (select(AttendanceRecord.student_id, User.name.label("student_name"),
                       AttendanceRecord.present)
                .join(User, AttendanceRecord.student_id == User.id)
                .where(AttendanceRecord.date == parse_date(day, "date"))
                .order_by(User.name))
        return jsonify(store.query_all(stmt))
    abort(400, "student_id required")
