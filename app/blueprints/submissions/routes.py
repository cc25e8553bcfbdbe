import logging
import os

from flask import abort, jsonify, request, send_from_directory
from flask_login import current_user, login_required
from sqlalchemy import select, update

from ... import store
from ...errors import StoreError
from ...extensions import file_store
from ...models import Assignment, Submission, User
from ...models.coursework import utcnow
from ...utils import payload, to_int, uploaded_file
from ..auth.routes import role_required, self_or_teacher
from . import bp

logger = logging.getLogger(__name__)


@bp.post("/submissions")
@login_required
@role_required("student")
def create_submission():
    assignment_id = payload().get("assignment_id")
    f = uploaded_file("file")
    if not assignment_id or f is None:
        abort(400, "Missing fields or file")
    assignment = store.get(Assignment, to_int(assignment_id, "assignment_id"))
    if not assignment:
        abort(404, "Assignment not found")

    submitted_at = utcnow()
    # late work is accepted as-is; the flag is only reported back
    late = submitted_at > assignment.due_at

    files = file_store()
    stored = files.save_upload("submission", f.filename, f.read())
    try:
        sub = store.add(Submission(
            assignment_id=assignment.id,
            student_id=current_user.user_id,
            file_path=stored,
            submitted_at=submitted_at,
        ))
    except StoreError:
        files.delete_upload("submission", stored)
        raise
    logger.info("Student %s submitted %s for assignment %s%s",
                current_user.user_id, stored, assignment.id, " (late)" if late else "")
    return jsonify(ok=True, id=sub.id, file=stored, late=late)


@bp.get("/submissions")
@login_required
@role_required("teacher")
def list_submissions():
    assignment_id = request.args.get("assignment_id")
    if not assignment_id:
        abort(400, "assignment_id required")
    stmt = (select(Submission.__table__, User.name.label("student_name"))
            .join(User, Submission.student_id == User.id)
            .where(Submission.assignment_id == to_int(assignment_id, "assignment_id"))
            .order_by(Submission.submitted_at.asc(), Submission.id.asc()))
    return jsonify(store.query_all(stmt))


@bp.get("/submissions/<int:sid>/download")
@login_required
def download_submission(sid):
    row = store.query_one(select(Submission.file_path).where(Submission.id == sid))
    if not row:
        abort(404, "Not found")
    directory = file_store().directory("submission")
    if not os.path.isfile(os.path.join(directory, row["file_path"])):
        abort(404, "File not found")
    return send_from_directory(directory, row["file_path"], as_attachment=True)


@bp.post("/submissions/<int:sid>/mark")
@login_required
@role_required("teacher")
def mark_submission(sid):
    marks = payload().get("marks")
    if marks is None or marks == "":
        abort(400, "marks required")
    # no existence check: marking an unknown id is a silent no-op
    store.execute(update(Submission).where(Submission.id == sid)
                  .values(marks=to_int(marks, "marks")))
    return jsonify(ok=True)


@bp.get("/marks")
@login_required
def list_marks():
    student_id = request.args.get("student_id")
    if not student_id:
        abort(400, "student_id required")
    student_id = to_int(student_id, "student_id")
    self_or_teacher(student_id)
    stmt = (select(Assignment.title, Assignment.due_at,
                   Submission.marks, Submission.submitted_at)
            .join(Assignment, Submission.assignment_id == Assignment.id)
            .where(Submission.student_id == student_id)
            .order_by(Assignment.due_at.desc()))
    return jsonify(store.query_all(stmt))
