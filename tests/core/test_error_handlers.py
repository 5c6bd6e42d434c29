"""
Tests for the global error handlers and the error envelope.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from jose import ExpiredSignatureError
from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError

from app.core.error_handlers import classify_integrity_error, register_error_handlers
from app.core.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationFailedError
from app.core.middleware import RequestIDMiddleware


class FakeDriverError(Exception):
    def __init__(self, message: str, sqlstate: str | None = None):
        super().__init__(message)
        self.sqlstate = sqlstate


def _integrity_error(message: str, sqlstate: str | None = None) -> IntegrityError:
    return IntegrityError("INSERT INTO things", {}, FakeDriverError(message, sqlstate))


class Payload(BaseModel):
    name: str = Field(min_length=2)


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    register_error_handlers(app)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/missing")
    async def missing():
        raise NotFoundError("University", "abc")

    @app.get("/conflict")
    async def conflict():
        raise ConflictError("Already there", "ALREADY_ENROLLED")

    @app.get("/forbidden")
    async def forbidden():
        raise PermissionDeniedError("Upgrade required", "SUBSCRIPTION_REQUIRED", {"requiredPlan": "global"})

    @app.get("/rule")
    async def rule():
        raise ValidationFailedError("minFee cannot be greater than maxFee", "INVALID_FEE_RANGE")

    @app.get("/duplicate")
    async def duplicate():
        raise _integrity_error("duplicate key value violates unique constraint", "23505")

    @app.get("/foreign-key")
    async def foreign_key():
        raise _integrity_error("violates foreign key constraint", "23503")

    @app.get("/expired")
    async def expired():
        raise ExpiredSignatureError("Signature has expired.")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    @app.post("/items")
    async def create_item(payload: Payload):
        return payload

    return TestClient(app, raise_server_exceptions=False)


class TestErrorEnvelope:
    def test_not_found(self, client):
        response = client.get("/missing")
        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "UNIVERSITY_NOT_FOUND"
        assert "requestId" in body["error"]

    def test_conflict(self, client):
        response = client.get("/conflict")
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ALREADY_ENROLLED"

    def test_details_are_passed_through(self, client):
        response = client.get("/forbidden")
        assert response.status_code == 403
        assert response.json()["error"]["details"] == {"requiredPlan": "global"}

    def test_business_rule_violation(self, client):
        response = client.get("/rule")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_FEE_RANGE"

    def test_request_validation(self, client):
        response = client.post("/items", json={"name": "x"})
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"][0]["field"] == "name"

    def test_duplicate_entry(self, client):
        response = client.get("/duplicate")
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_ENTRY"

    def test_foreign_key_violation(self, client):
        response = client.get("/foreign-key")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REFERENCE"

    def test_expired_jwt(self, client):
        response = client.get("/expired")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "TOKEN_EXPIRED"

    def test_unknown_route(self, client):
        response = client.get("/nope")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_method_not_allowed(self, client):
        response = client.delete("/missing")
        assert response.status_code == 405
        assert response.json()["error"]["code"] == "METHOD_NOT_ALLOWED"

    def test_unhandled_exception(self, client):
        response = client.get("/boom")
        assert response.status_code == 500
        assert response.json()["error"]["code"] == "INTERNAL_ERROR"

    def test_request_id_header_echoed(self, client):
        response = client.get("/missing", headers={"X-Request-ID": "req-42"})
        assert response.headers["X-Request-ID"] == "req-42"
        assert response.json()["error"]["requestId"] == "req-42"


class TestClassifyIntegrityError:
    def test_unique_by_sqlstate(self):
        assert classify_integrity_error(_integrity_error("boom", "23505"))[:2] == (409, "DUPLICATE_ENTRY")

    def test_foreign_key_by_message(self):
        assert classify_integrity_error(_integrity_error("violates foreign key constraint"))[:2] == (
            400,
            "INVALID_REFERENCE",
        )

    def test_not_null(self):
        assert classify_integrity_error(_integrity_error("boom", "23502"))[1] == "MISSING_FIELD"

    def test_other_constraint(self):
        assert classify_integrity_error(_integrity_error("check constraint failed"))[1] == "CONSTRAINT_VIOLATION"
