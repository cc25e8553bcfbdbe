import logging

from sqlalchemy import func, inspect, select, text

from .extensions import db
from .models import User

logger = logging.getLogger(__name__)

DEMO_USERS = [
    ("Alice", "student"),
    ("Bob", "student"),
    ("Prof. Rao", "teacher"),
    ("Dr. Singh", "teacher"),
]


def init_schema():
    db.create_all()
    # databases created before profile photos existed lack this column
    columns = {c["name"] for c in inspect(db.engine).get_columns("users")}
    if "photo_path" not in columns:
        with db.engine.begin() as conn:
            conn.execute(text("ALTER TABLE users ADD COLUMN photo_path VARCHAR(255)"))
        logger.info("Added photo_path column to users table")


def seed_demo_data():
    count = db.session.execute(select(func.count()).select_from(User)).scalar()
    if count:
        return 0
    db.session.add_all([User(name=name, role=role) for name, role in DEMO_USERS])
    db.session.commit()
    logger.info("Seeded %d demo users", len(DEMO_USERS))
    return len(DEMO_USERS)


def bootstrap(app):
    with app.app_context():
        init_schema()
        if app.config.get("SEED_DEMO_DATA"):
            seed_demo_data()
    logger.info("Database initialized")
