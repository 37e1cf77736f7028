from fastapi.testclient import TestClient
from pydantic import BaseModel

from vendorhub.core.exceptions import (
    AlreadyVerifiedError,
    NotOwnerError,
    ResourceNotFoundError,
    TokenInvalidError,
    TokenMissingError,
    VerificationRejectedError,
)
from vendorhub.main import create_app

app = create_app(use_lifespan=False)
client = TestClient(app)


class Item(BaseModel):
    name: str
    price: int


@app.post("/test-validation")
def create_item(item: Item):
    return item


@app.get("/test-custom-error")
def trigger_custom_error():
    raise ResourceNotFoundError(message="Item not found")


@app.get("/test-not-owner")
def trigger_not_owner():
    raise NotOwnerError(message="Product not found")


def test_404_not_found():
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert "error" in data
    assert "code" in data
    assert data["code"] == "HTTP_ERROR"


def test_validation_error_structure():
    response = client.post("/test-validation", json={"name": "foo", "price": "invalid"})
    assert response.status_code == 422
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert "details" in data
    assert len(data["details"]) > 0


def test_custom_exception():
    response = client.get("/test-custom-error")
    assert response.status_code == 404
    data = response.json()
    assert data["code"] == "NOT_FOUND"
    assert data["error"] == "Item not found"


def test_not_owner_renders_as_not_found():
    response = client.get("/test-not-owner")
    assert response.status_code == 404
    assert response.json() == {"error": "Product not found", "code": "NOT_FOUND", "details": None}


def test_error_status_codes():
    assert TokenMissingError().status_code == 401
    assert TokenInvalidError().status_code == 403
    assert AlreadyVerifiedError().status_code == 400
    rejected = VerificationRejectedError("canceled")
    assert rejected.status_code == 400
    assert rejected.details == {"status": "canceled"}
