import logging

from flask import abort, jsonify, request
from flask_login import current_user, login_required
from sqlalchemy import select

from ... import store
from ...errors import StoreError
from ...extensions import file_store
from ...models import ROLES, User
from ...utils import payload, text_field, uploaded_file
from . import bp

logger = logging.getLogger(__name__)


@bp.get("")
def list_users():
    role = (request.args.get("role") or "").strip()
    stmt = select(User.__table__).order_by(User.id)
    if role:
        stmt = stmt.where(User.role == role)
    return jsonify(store.query_all(stmt))


@bp.post("")
def create_user():
    data = payload()
    name = text_field(data, "name")
    role = data.get("role")
    if not name or role not in ROLES:
        abort(400, "name and valid role required")
    user = store.add(User(name=name, role=role))
    logger.info("Created %s %s", role, user.id)
    return jsonify(user.to_dict())


@bp.get("/<int:uid>")
def get_user(uid):
    user = store.get(User, uid)
    if not user:
        abort(404, "User not found")
    return jsonify(user.to_dict())


@bp.put("/<int:uid>")
@login_required
def update_user(uid):
    if current_user.user_id != uid:
        abort(403, "Forbidden")
    user = store.get(User, uid)
    if not user:
        abort(404, "User not found")

    name = text_field(payload(), "name")
    photo = uploaded_file("photo")
    if not name and photo is None:
        abort(400, "No fields to update")

    files = file_store()
    old_photo = user.photo_path
    new_photo = None
    if photo is not None:
        new_photo = files.save_upload("photo", photo.filename, photo.read())
        user.photo_path = new_photo
    if name:
        user.name = name

    try:
        store.commit()
    except StoreError:
        files.delete_upload("photo", new_photo)
        raise
    if new_photo and old_photo:
        files.delete_upload("photo", old_photo)
    return jsonify(user.to_dict())
