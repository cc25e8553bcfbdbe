import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException, InternalServerError

logger = logging.getLogger(__name__)


class StoreError(InternalServerError):
    """Persistence failure; carries the driver message as its description."""

    def __init__(self, message):
        super().__init__(description=message)


def register_error_handlers(app):
    @app.errorhandler(HTTPException)
    def http_error(exc):
        if exc.code >= 500:
            logger.error("%s %s: %s", exc.code, exc.name, exc.description)
        return jsonify(error=exc.description), exc.code

    @app.errorhandler(Exception)
    def unhandled_error(exc):
        logger.exception("Unhandled error")
        return jsonify(error=str(exc)), 500
