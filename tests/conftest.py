import pytest

from app import create_app


@pytest.fixture
def make_app(tmp_path):
    """Builds an app on a database file under tmp_path; calling it again simulates a restart."""

    def _make_app():
        return create_app({
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'inventory.db'}",
            "SESSION_FILE_DIR": str(tmp_path / "sessions"),
        })

    return _make_app


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def logged_in(client):
    client.post("/register", json={"username": "alice", "password": "secret"})
    client.post("/login", json={"username": "alice", "password": "secret"})
    return client
