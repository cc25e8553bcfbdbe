from flask import abort, send_from_directory

from ...extensions import file_store
from ...files import CATEGORIES
from . import bp

_BY_FOLDER = {folder: category for category, folder in CATEGORIES.items()}


@bp.get("/<folder>/<path:filename>")
def serve(folder, filename):
    category = _BY_FOLDER.get(folder)
    if category is None:
        abort(404, "Not found")
    return send_from_directory(file_store().directory(category), filename)
