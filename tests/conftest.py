import pytest
from fastapi.testclient import TestClient
from main import app

CUSTOMER = {"X-User-ID": "1"}
DRIVER = {"X-User-ID": "2"}
ADMIN = {"X-User-ID": "3"}

@pytest.fixture
def client():
    with TestClient(app) as client:
        yield client

def package_payload(**overrides):
    payload = {
        "sender": {
            "name": "John Doe",
            "phone": "+1234567890",
            "email": "customer@kingx.com",
            "address": {
                "street": "1 Broadway",
                "city": "New York",
                "state": "NY",
                "zipCode": "10004",
                "coordinates": {"lat": 40.7056, "lng": -74.0132},
            },
        },
        "receiver": {
            "name": "Jane Roe",
            "phone": "+1987654321",
            "email": "jane@example.com",
            "address": {
                "street": "200 Park Ave",
                "city": "Jersey City",
                "state": "NJ",
                "zipCode": "07302",
                "coordinates": {"lat": 40.7178, "lng": -74.0431},
            },
        },
        "packageDetails": {
            "category": "documents",
            "weight": 3,
            "dimensions": {"length": 30, "width": 20, "height": 5},
            "value": 300,
            "description": "Signed contracts",
            "fragile": False,
            "insurance": True,
        },
        "delivery": {"type": "express", "priority": "high"},
        "paymentMethod": "credit_card",
        "distance": 10,
    }
    payload.update(overrides)
    return payload
