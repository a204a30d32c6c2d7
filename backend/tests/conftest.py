import os

# Must be set before the app (and its settings/engine) is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from blog_api.core.database import Base, SessionLocal, engine, get_db
from blog_api.main import app


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    """Register a user and return the response body (token + user)"""
    def _register(name="Alice", email="alice@example.com", password="secret1", **extra):
        response = client.post("/api/auth/register", json={
            "name": name, "email": email, "password": password, **extra
        })
        assert response.status_code == 201, response.text
        return response.json()
    return _register


@pytest.fixture
def create_post(client):
    def _create_post(token, title="Hello World", content="This is my first post", **extra):
        response = client.post(
            "/api/posts",
            json={"title": title, "content": content, **extra},
            headers=auth_headers(token),
        )
        assert response.status_code == 201, response.text
        return response.json()["post"]
    return _create_post
