import os
from pathlib import Path
BASE_DIR = Path(__file__).resolve().parent


def _database_url():
    url = os.environ.get("DATABASE_URL")
    if not url:
        return f"sqlite:///{(BASE_DIR / 'portal.db').as_posix()}"
    # SQLAlchemy only accepts the postgresql:// scheme
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", (BASE_DIR / "uploads").as_posix())
    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_UPLOAD_SIZE", 10 * 1024 * 1024))

    SESSION_HEADER = "X-Session-Id"
    SESSION_QUERY_PARAM = "sessionId"

    SEED_DEMO_DATA = os.environ.get("SEED_DEMO_DATA", "true").lower() == "true"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
