from flask import current_app
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager

db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()


def file_store():
    return current_app.extensions["file_store"]


def session_registry():
    return current_app.extensions["session_registry"]
