import pytest

from app import create_app
from app.extensions import db
from config import Config


@pytest.fixture
def make_app(tmp_path):
    apps = []

    def factory(**overrides):
        attrs = {
            "TESTING": True,
            "SECRET_KEY": "test",
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{(tmp_path / 'portal.db').as_posix()}",
            "UPLOAD_FOLDER": (tmp_path / "uploads").as_posix(),
            "SEED_DEMO_DATA": False,
            "LOG_LEVEL": "WARNING",
        }
        attrs.update(overrides)
        app = create_app(type("TestConfig", (Config,), attrs))
        apps.append(app)
        return app

    yield factory
    for app in apps:
        with app.app_context():
            db.session.remove()
            db.engine.dispose()


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def create_user(client):
    def _create(name, role):
        resp = client.post("/api/users", json={"name": name, "role": role})
        assert resp.status_code == 200
        return resp.get_json()["id"]
    return _create


@pytest.fixture
def login(client):
    def _login(user_id, role):
        resp = client.post("/api/auth/login",
                           json={"user_id": user_id, "password": "pw", "role": role})
        assert resp.status_code == 200
        return {"X-Session-Id": resp.get_json()["sessionId"]}
    return _login


@pytest.fixture
def teacher(create_user, login):
    uid = create_user("Prof. Rao", "teacher")
    return uid, login(uid, "teacher")


@pytest.fixture
def student(create_user, login):
    uid = create_user("Alice", "student")
    return uid, login(uid, "student")
