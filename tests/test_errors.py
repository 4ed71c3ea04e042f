import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from designhub.core.errors import (
    ConflictError, DomainError, InvalidStateError, NotFoundError, ValidationError, with_conflict_retry,
)
from designhub.main import domain_error_handler


def test_status_codes():
    assert NotFoundError("x").status_code == 404
    assert ValidationError("x").status_code == 400
    assert InvalidStateError("x").status_code == 409
    assert ConflictError("x").status_code == 409
    assert ConflictError("x").retryable
    assert not InvalidStateError("x").retryable


async def test_conflict_retried_once():
    calls = []

    async def flaky(value):
        calls.append(value)
        if len(calls) == 1:
            raise ConflictError("lost the race")
        return value * 2

    assert await with_conflict_retry(flaky, 21) == 42
    assert calls == [21, 21]


async def test_conflict_gives_up_after_retries():
    calls = []

    async def always_conflicts():
        calls.append(1)
        raise ConflictError("lost the race")

    with pytest.raises(ConflictError):
        await with_conflict_retry(always_conflicts, retries=1)
    assert len(calls) == 2


async def test_other_errors_not_retried():
    calls = []

    async def invalid():
        calls.append(1)
        raise InvalidStateError("archived")

    with pytest.raises(InvalidStateError):
        await with_conflict_retry(invalid, retries=3)
    assert len(calls) == 1


def _app() -> FastAPI:
    app = FastAPI()
    app.add_exception_handler(DomainError, domain_error_handler)

    @app.get("/missing")
    async def missing():
        raise NotFoundError("Drawing not found")

    @app.get("/conflict")
    async def conflict():
        raise ConflictError("Drawing was revised concurrently")

    return app


def test_handler_maps_not_found():
    client = TestClient(_app())
    r = client.get("/missing")
    assert r.status_code == 404
    assert r.json() == {"detail": "Drawing not found", "error": "NotFoundError"}


def test_handler_flags_retryable():
    client = TestClient(_app())
    r = client.get("/conflict")
    assert r.status_code == 409
    assert r.json()["retryable"] is True
