# tests/common/test_exceptions.py
"""
Tests for the exception taxonomy and its HTTP rendering.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field

from src.common.exceptions import (
    AuthenticationError,
    DuplicateResourceError,
    InvalidStateError,
    NotFoundError,
    PeerServiceError,
    ServiceError,
    UnauthorizedError,
    register_exception_handlers,
)


class Payload(BaseModel):
    quantity: int = Field(ge=1)


def build_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/not-found")
    async def not_found():
        raise NotFoundError("Order 1 not found", details={"order_id": 1})

    @app.get("/peer")
    async def peer():
        raise PeerServiceError("customer_service unreachable")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("unexpected")

    @app.post("/payload")
    async def payload(body: Payload):
        return body

    return app


@pytest.fixture
def client() -> TestClient:
    return TestClient(build_app(), raise_server_exceptions=False)


@pytest.mark.parametrize(
    "exc_class, status_code",
    [
        (NotFoundError, 404),
        (DuplicateResourceError, 409),
        (UnauthorizedError, 403),
        (AuthenticationError, 401),
        (InvalidStateError, 400),
        (PeerServiceError, 502),
    ],
)
def test_status_codes(exc_class, status_code) -> None:
    exc = exc_class("message")

    assert isinstance(exc, ServiceError)
    assert exc.status_code == status_code
    assert exc.message == "message"


def test_authentication_error_is_an_unauthorized_error() -> None:
    assert issubclass(AuthenticationError, UnauthorizedError)


def test_service_error_is_rendered(client: TestClient) -> None:
    response = client.get("/not-found", headers={"X-Request-ID": "req-1"})

    assert response.status_code == 404
    body = response.json()
    assert body["error_code"] == "not_found"
    assert body["message"] == "Order 1 not found"
    assert body["details"] == {"order_id": 1}
    assert body["request_id"] == "req-1"


def test_request_id_is_generated_when_absent(client: TestClient) -> None:
    body = client.get("/peer").json()

    assert body["error_code"] == "peer_service_error"
    assert len(body["request_id"]) == 32


def test_validation_error_is_422(client: TestClient) -> None:
    response = client.post("/payload", json={"quantity": 0})

    assert response.status_code == 422
    body = response.json()
    assert body["error_code"] == "validation_error"
    assert body["details"]["errors"]


def test_unknown_route_uses_error_shape(client: TestClient) -> None:
    response = client.get("/missing")

    assert response.status_code == 404
    assert response.json()["error_code"] == "http_error"


def test_unhandled_exception_is_500(client: TestClient) -> None:
    response = client.get("/boom")

    assert response.status_code == 500
    assert response.json()["error_code"] == "server_error"
