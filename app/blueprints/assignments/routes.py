import logging

from flask import abort, jsonify
from flask_login import current_user, login_required
from sqlalchemy import select

from ... import store
from ...models import Assignment, User
from ...utils import parse_datetime, payload, text_field
from ..auth.routes import role_required
from . import bp

logger = logging.getLogger(__name__)


@bp.get("")
def list_assignments():
    stmt = (select(Assignment.__table__, User.name.label("teacher_name"))
            .join(User, Assignment.created_by == User.id)
            .order_by(Assignment.due_at.asc(), Assignment.id.asc()))
    return jsonify(store.query_all(stmt))


@bp.post("")
@login_required
@role_required("teacher")
def create_assignment():
    data = payload()
    title = text_field(data, "title")
    due_at = data.get("due_at")
    if not title or not due_at:
        abort(400, "Missing required fields")
    a = store.add(Assignment(
        title=title,
        description=text_field(data, "description"),
        due_at=parse_datetime(due_at, "due_at"),
        created_by=current_user.user_id,
    ))
    logger.info("Teacher %s created assignment %s", current_user.user_id, a.id)
    return jsonify(ok=True, id=a.id)
