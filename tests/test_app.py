from fastapi.testclient import TestClient

from designhub.dependencies import get_db
from designhub.main import app


async def _no_db():
    yield None


app.dependency_overrides[get_db] = _no_db
client = TestClient(app)


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_requires_bearer_token():
    r = client.get("/projects")
    assert r.status_code == 401


def test_rejects_garbage_token():
    r = client.get("/projects", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
