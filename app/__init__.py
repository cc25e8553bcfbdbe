import logging
from collections.abc import Mapping
from datetime import date

import click
from flask import Flask, abort
from flask_cors import CORS
from flask.json.provider import DefaultJSONProvider

from .extensions import db, migrate, login_manager, session_registry
from .errors import register_error_handlers
from .files import FileStore
from .sessions import SessionRegistry


class PortalJSONProvider(DefaultJSONProvider):
    @staticmethod
    def default(o):
        if isinstance(o, date):
            return o.isoformat()
        if isinstance(o, Mapping):
            return dict(o)
        return DefaultJSONProvider.default(o)


def configure_logging(app):
    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def register_commands(app):
    @app.cli.command("init-db")
    def init_db_command():
        """Create tables and seed demo users."""
        from .bootstrap import init_schema, seed_demo_data
        init_schema()
        click.echo(f"Database ready ({seed_demo_data()} users seeded)")


def create_app(config_object="config.Config", sessions=None):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.json = PortalJSONProvider(app)
    CORS(app, resources={r"/api/*": {"origins": "*"}})
    configure_logging(app)

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    login_manager.session_protection = None

    files = FileStore(app.config["UPLOAD_FOLDER"])
    files.ensure_dirs()
    app.extensions["file_store"] = files
    app.extensions["session_registry"] = sessions if sessions is not None else SessionRegistry()

    from . import models  # noqa: F401
    from .blueprints.auth.routes import request_token

    @login_manager.request_loader
    def load_session(request):
        return session_registry().lookup(request_token(request))

    @login_manager.unauthorized_handler
    def unauthorized():
        abort(401, "Unauthorized")

    from .blueprints.auth import bp as auth_bp
    from .blueprints.users import bp as users_bp
    from .blueprints.assignments import bp as assignments_bp
    from .blueprints.submissions import bp as submissions_bp
    from .blueprints.timetable import bp as timetable_bp
    from .blueprints.attendance import bp as attendance_bp
    from .blueprints.uploads import bp as uploads_bp
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(users_bp, url_prefix="/api/users")
    app.register_blueprint(assignments_bp, url_prefix="/api/assignments")
    app.register_blueprint(submissions_bp, url_prefix="/api")
    app.register_blueprint(timetable_bp, url_prefix="/api/timetable")
    app.register_blueprint(attendance_bp, url_prefix="/api/attendance")
    app.register_blueprint(uploads_bp, url_prefix="/uploads")
    register_error_handlers(app)
    register_commands(app)

    from .bootstrap import bootstrap
    bootstrap(app)

    return app
